"""
Card file parser.

Turns the lines of a card definition file into cards. The format is line
oriented; most cards fit on one line, longer sides span several lines.

    # comment
    front and id
    front and id | back
    [id] front | back
    [id] `
    multi-line front
    ` | back
    [id] ```
    fenced front
    ``` | `
    multi-line back
    `

A side consisting of a single backtick starts a multi-line body that ends
with a closing backtick; a side of three backticks starts a fenced body
whose fences are kept in the text.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from cardfile.constants import FIELD_DELIMITER
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.exceptions import CardParseError

logger = structlog.get_logger(__name__)

SIDE_DELIMITER = FIELD_DELIMITER
COMMENT_PREFIX = "#"
MULTI_LINE_MARKER = "`"
FENCE = "```"

# Optional leading whitespace, "[id]", then the rest of the side - group 1 is the id
_BRACKETED_ID_PATTERN = re.compile(r"^\s*\[(.+?)\](.*)$")


class ParseState(Enum):
    """Where the parser is within the card file grammar."""

    NEW_CARD = "new_card"
    FRONT_MULTI = "front_multi"
    FRONT_MULTI_FENCED = "front_multi_fenced"
    BACK_MULTI = "back_multi"
    BACK_MULTI_FENCED = "back_multi_fenced"


def _trim(text: str) -> str:
    return text.strip(" \t")


def _back_side(side: str) -> tuple[str, ParseState]:
    marker = _trim(side)
    if marker == MULTI_LINE_MARKER:
        return "", ParseState.BACK_MULTI
    if marker == FENCE:
        return FENCE, ParseState.BACK_MULTI_FENCED
    return marker, ParseState.NEW_CARD


def parse_one_side(side: str) -> tuple[str, str, ParseState]:
    """
    Parse a line holding only the front of a card.

    Accepted forms: plain text (both id and front), "[id]", "[id] front text",
    "[id]" followed by a single backtick (multi-line front) and "[id]"
    followed by a fence (fenced front).

    Returns:
        Tuple of (id, front, next parse state)
    """
    match = _BRACKETED_ID_PATTERN.match(side)
    if match is None:
        return _trim(side), _trim(side), ParseState.NEW_CARD

    card_id, remainder = _trim(match.group(1)), _trim(match.group(2))
    if remainder == MULTI_LINE_MARKER:
        return card_id, "", ParseState.FRONT_MULTI
    if remainder == FENCE:
        return card_id, FENCE, ParseState.FRONT_MULTI_FENCED
    return card_id, remainder, ParseState.NEW_CARD


def parse_two_sides(first: str, second: str) -> tuple[str, str, str, ParseState]:
    """
    Parse a ``front | back`` line.

    The front may carry a bracketed id; the back may open a multi-line
    or fenced body.

    Returns:
        Tuple of (id, front, back, next parse state)
    """
    match = _BRACKETED_ID_PATTERN.match(first)
    if match is None:
        card_id = front = _trim(first)
    else:
        card_id, front = _trim(match.group(1)), _trim(match.group(2))

    back, state = _back_side(second)
    return card_id, front, back, state


@dataclass
class CardDraft:
    """A card whose multi-line sides are still being read."""

    id: str
    front: str
    back: str

    def append_front(self, line: str) -> None:
        self.front = line if self.front == "" else f"{self.front}\n{line}"

    def append_back(self, line: str) -> None:
        self.back = line if self.back == "" else f"{self.back}\n{line}"

    def build(self) -> Card:
        return Card.create(self.id, self.front, self.back)


class CardFileParser:
    """
    State machine over the lines of one card definition file.

    A parser instance can be reused; all state is reset by ``parse``.
    """

    def __init__(self) -> None:
        self._cards: list[Card] = []
        self._seen_ids: set[str] = set()
        self._draft: CardDraft | None = None

    def parse(self, lines: Iterable[str]) -> list[Card]:
        """
        Parse card definitions.

        Args:
            lines: Lines of a card file, with or without line endings

        Returns:
            Cards in definition order

        Raises:
            CardParseError: On the first grammar violation, tagged with
                the 1-based line number it was detected on
        """
        self._cards = []
        self._seen_ids = set()
        self._draft = None

        state = ParseState.NEW_CARD
        line_number = 0
        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.rstrip("\r\n")
            state = self._consume(state, line, line_number)

        if state is not ParseState.NEW_CARD:
            raise CardParseError("file ended inside a multi-line body", line_number)

        cards = self._cards
        logger.debug("parsed_card_definitions", card_count=len(cards), line_count=line_number)
        return cards

    def _consume(self, state: ParseState, line: str, line_number: int) -> ParseState:
        if state is ParseState.NEW_CARD:
            return self._new_card(line, line_number)

        draft = self._draft
        if draft is None:
            raise CardParseError("no card to extend", line_number)

        if state is ParseState.FRONT_MULTI:
            return self._front_multi(draft, line, MULTI_LINE_MARKER)
        if state is ParseState.FRONT_MULTI_FENCED:
            return self._front_multi(draft, line, FENCE)
        if state is ParseState.BACK_MULTI:
            if line == MULTI_LINE_MARKER:
                return self._finish()
            draft.append_back(line)
            return state
        # BACK_MULTI_FENCED
        if line == FENCE:
            draft.back = f"{draft.back}\n{FENCE}"
            return self._finish()
        draft.back = f"{draft.back}\n{line}"
        return state

    def _new_card(self, line: str, line_number: int) -> ParseState:
        if _trim(line) == "" or line.startswith(COMMENT_PREFIX):
            return ParseState.NEW_CARD

        sides = line.split(SIDE_DELIMITER)
        if len(sides) == 1:
            card_id, front, state = parse_one_side(sides[0])
            back = ""
        elif len(sides) == 2:
            card_id, front, back, state = parse_two_sides(sides[0], sides[1])
        else:
            raise CardParseError("unexpected number of sides", line_number)

        card_id = _trim(card_id)
        if not card_id:
            raise CardParseError("card id can not be empty", line_number)
        if card_id in self._seen_ids:
            raise CardParseError(f"duplicate card id '{card_id}'", line_number)
        self._seen_ids.add(card_id)

        self._draft = CardDraft(id=card_id, front=_trim(front), back=_trim(back))
        if state is ParseState.NEW_CARD:
            return self._finish()
        return state

    def _front_multi(self, draft: CardDraft, line: str, opening: str) -> ParseState:
        # Closing tokens mirror the opening marker: "` | `", "` | ```", "` | back"
        closing = f"{opening}{SIDE_DELIMITER}"
        if not line.startswith(closing):
            if opening == FENCE:
                draft.front = f"{draft.front}\n{line}"
                return ParseState.FRONT_MULTI_FENCED
            draft.append_front(line)
            return ParseState.FRONT_MULTI

        if opening == FENCE:
            draft.front = f"{draft.front}\n{FENCE}"

        back = line[len(closing) :]
        if back == MULTI_LINE_MARKER:
            draft.back = ""
            return ParseState.BACK_MULTI
        if back == FENCE:
            draft.back = FENCE
            return ParseState.BACK_MULTI_FENCED
        draft.back = back
        return self._finish()

    def _finish(self) -> ParseState:
        if self._draft is not None:
            self._cards.append(self._draft.build())
            self._draft = None
        return ParseState.NEW_CARD


def parse_definitions(text: str) -> list[Card]:
    """
    Parse the text of a card definition file.

    Raises:
        CardParseError: If the text violates the card file grammar
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return CardFileParser().parse(lines)
