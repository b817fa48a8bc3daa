"""Repository for card definition and progress files."""

import re
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

import structlog

from cardfile.constants import FIELD_DELIMITER
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.entities.card_set import CardSet
from cardfile.domain.learning.exceptions import CardParseError, ProgressRecordError
from cardfile.domain.learning.services.card_file_parser import parse_definitions

logger = structlog.get_logger(__name__)

_PROGRESS_FIELD_COUNT = 3
_STREAK_PATTERN = re.compile(r"\d+")
# Fractional seconds longer than microseconds, e.g. "05.123456789Z"
_LONG_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def format_timestamp(value: datetime) -> str:
    """
    Serialize a review time as RFC 3339 in UTC.

    Naive datetimes are treated as UTC. The never-reviewed value becomes
    "0001-01-01T00:00:00Z".
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """
    Parse an RFC 3339 review time.

    Accepts a "Z" suffix or a numeric offset, and nanosecond fractions
    (truncated to microseconds). The result is in UTC.

    Raises:
        ValueError: If the text is not a valid timestamp or lies outside
            the representable UTC range (e.g. "0001-01-01T00:00:00+01:00")
    """
    value = datetime.fromisoformat(_LONG_FRACTION_PATTERN.sub(r"\1", text))
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {text}") from e


def _read_lines(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


class ProgressRepository:
    """
    Loads card sets from definition files and reads and writes
    their progress files.

    Progress files hold one " | "-delimited record per card:
    id, last review time (RFC 3339) and correct streak.
    """

    def read_definitions(self, definition_path: Path) -> list[Card]:
        """
        Parse the cards defined in a definition file.

        Raises:
            FileNotFoundError: If the definition file does not exist
            CardParseError: If the file is malformed (names the file and line)
        """
        text = definition_path.read_text(encoding="utf-8")
        try:
            return parse_definitions(text)
        except CardParseError as e:
            raise e.with_path(definition_path) from e

    def merge_progress(self, progress_path: Path, cards: list[Card]) -> list[Card]:
        """
        Merge a progress file into freshly parsed cards.

        Records for defined ids overwrite the card's review state; records
        for unknown ids become orphaned cards appended after the defined ones.
        A missing progress file means there is no progress yet.

        Args:
            progress_path: Progress file to read
            cards: Cards parsed from the matching definition file

        Returns:
            Cards with progress applied, orphans last

        Raises:
            ProgressRecordError: If a record is malformed
        """
        if not progress_path.exists():
            logger.debug("progress_file_missing", progress_path=str(progress_path))
            return cards

        merged = list(cards)
        by_id = {card.id.value: card for card in merged}
        orphan_count = 0

        for line_number, line in enumerate(_read_lines(progress_path), start=1):
            card_id, last_reviewed, correct_streak = self._parse_record(
                progress_path, line_number, line
            )
            card = by_id.get(card_id)
            if card is not None:
                card.restore_progress(last_reviewed, correct_streak)
                continue
            orphan = Card.orphan(card_id, last_reviewed, correct_streak)
            merged.append(orphan)
            by_id[card_id] = orphan
            orphan_count += 1

        logger.debug(
            "progress_merged",
            progress_path=str(progress_path),
            card_count=len(cards),
            orphan_count=orphan_count,
        )
        return merged

    def _parse_record(
        self, progress_path: Path, line_number: int, line: str
    ) -> tuple[str, datetime, int]:
        fields = line.split(FIELD_DELIMITER)
        if len(fields) != _PROGRESS_FIELD_COUNT:
            raise ProgressRecordError(
                progress_path, line_number, f"expected 3 fields, found {len(fields)}"
            )

        card_id, timestamp_text, streak_text = fields
        if not card_id.strip(" \t"):
            raise ProgressRecordError(progress_path, line_number, "empty card id")

        try:
            last_reviewed = parse_timestamp(timestamp_text)
        except ValueError as e:
            raise ProgressRecordError(
                progress_path, line_number, f"invalid timestamp '{timestamp_text}'"
            ) from e

        if not _STREAK_PATTERN.fullmatch(streak_text):
            raise ProgressRecordError(
                progress_path, line_number, f"invalid correct streak '{streak_text}'"
            )

        return card_id, last_reviewed, int(streak_text)

    def load_card_set(self, definition_path: Path, progress_path: Path) -> list[Card]:
        """
        Load the cards of one card set with their progress.

        Raises:
            FileNotFoundError: If the definition file does not exist
            CardParseError: If the definition file is malformed
            ProgressRecordError: If the progress file is malformed
        """
        cards = self.read_definitions(definition_path)
        return self.merge_progress(progress_path, cards)

    def save_progress(self, progress_path: Path, cards: Iterable[Card], clean: bool) -> int:
        """
        Write the progress file for a card set.

        Args:
            progress_path: Progress file to (over)write; parent directories are created
            cards: Cards whose review state to write
            clean: Drop orphaned cards instead of preserving their progress

        Returns:
            Number of records written
        """
        records = [
            FIELD_DELIMITER.join(
                (card.id.value, format_timestamp(card.last_reviewed), str(card.correct_streak))
            )
            for card in cards
            if not (clean and not card.defined_in_file)
        ]

        progress_path.parent.mkdir(parents=True, exist_ok=True)
        progress_path.write_text("".join(f"{record}\n" for record in records), encoding="utf-8")

        logger.info(
            "progress_saved",
            progress_path=str(progress_path),
            record_count=len(records),
            clean=clean,
        )
        return len(records)

    def load(self, card_set: CardSet) -> CardSet:
        """Reload a card set's cards from its definition and progress files."""
        card_set.replace_cards(
            self.load_card_set(card_set.definition_path, card_set.progress_path)
        )
        return card_set

    def save(self, card_set: CardSet, clean: bool = False) -> int:
        """Write a card set's progress file."""
        return self.save_progress(card_set.progress_path, card_set.cards, clean)


def load_card_set(definition_path: Path, progress_path: Path) -> list[Card]:
    """Load one card set's cards with their progress merged in."""
    return ProgressRepository().load_card_set(definition_path, progress_path)


def save_progress(progress_path: Path, cards: Iterable[Card], clean: bool) -> int:
    """Write one card set's progress file."""
    return ProgressRepository().save_progress(progress_path, cards, clean)
