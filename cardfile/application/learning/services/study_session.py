"""Study sessions over one card set."""

import random
from datetime import datetime
from enum import Enum

import structlog

from cardfile.constants import DRAW_LIMIT
from cardfile.domain.common.exceptions import ValidationError
from cardfile.domain.common.value_objects import Fingerprint
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.entities.card_set import CardSet
from cardfile.domain.learning.exceptions import NoCardsAvailableError
from cardfile.domain.learning.services import scheduler

logger = structlog.get_logger(__name__)


class CardSelection(Enum):
    """Which cards of a card set a session studies."""

    ALL = "all"
    DUE_OR_NEW = "due_new"
    DUE = "due"
    NEW = "new"
    INTERVAL = "interval"

    @property
    def spaced_repetition(self) -> bool:
        """Spaced-repetition sessions update review state; drills do not."""
        return self in (CardSelection.DUE_OR_NEW, CardSelection.DUE, CardSelection.NEW)


class ReviewOutcome(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIP = "skip"


_LABELS = {
    CardSelection.ALL: "all",
    CardSelection.DUE_OR_NEW: "due or new",
    CardSelection.DUE: "due",
    CardSelection.NEW: "new",
}


def parse_selection(token: str | None) -> tuple[CardSelection, int | None]:
    """
    Map a session token such as "all", "new", "due" or "5" to a selection.

    No token means due-or-new. A number selects the cards at that interval.

    Raises:
        ValidationError: If the token is not recognised
    """
    if token is None or token == "":
        return CardSelection.DUE_OR_NEW, None
    if token.isdigit():
        return CardSelection.INTERVAL, int(token)
    try:
        selection = CardSelection(token)
    except ValueError as e:
        raise ValidationError(f"Unknown card selection '{token}'", field="selection", value=token) from e
    if selection is CardSelection.INTERVAL:
        raise ValidationError("Interval selection needs a number of days", field="selection", value=token)
    return selection, None


def _highest_streak_subset(cards: list[Card], limit: int) -> list[Card]:
    # Cards closest to graduating to a longer interval come first
    subset: list[Card] = []
    streak = max(card.correct_streak for card in cards)
    while streak >= 0 and len(subset) < limit:
        for card in cards:
            if card.correct_streak == streak:
                subset.append(card)
                if len(subset) >= limit:
                    break
        streak -= 1
    return subset


class StudySession:
    """
    One pass of studying a card set.

    Spaced-repetition sessions (due or new, due, new) apply answers to the
    cards' review state through the card set, which leaves the set with
    unsaved progress. Drill sessions (all, interval) only remember which
    cards were answered correctly so they are not drawn again.
    """

    def __init__(
        self,
        card_set: CardSet,
        selection: CardSelection = CardSelection.DUE_OR_NEW,
        interval: int | None = None,
        draw_limit: int = DRAW_LIMIT,
    ) -> None:
        if selection is CardSelection.INTERVAL and interval is None:
            raise ValidationError("Interval selection needs an interval", field="interval", value=None)
        if draw_limit < 1:
            raise ValidationError("Draw limit must be positive", field="draw_limit", value=draw_limit)

        self.card_set = card_set
        self.selection = selection
        self.interval = interval if selection is CardSelection.INTERVAL else None
        self.draw_limit = draw_limit
        self.done = scheduler.DrillSession()

    @property
    def spaced_repetition(self) -> bool:
        return self.selection.spaced_repetition

    @property
    def label(self) -> str:
        if self.selection is CardSelection.INTERVAL:
            return f"interval {self.interval} day(s)"
        return _LABELS[self.selection]

    def _select(self, now: datetime | None) -> list[Card]:
        cards = self.card_set.cards
        if self.selection is CardSelection.ALL:
            return scheduler.select_all(cards, session=self.done)
        if self.selection is CardSelection.DUE_OR_NEW:
            return scheduler.select_due_or_new(cards, now=now)
        if self.selection is CardSelection.DUE:
            return scheduler.select_due(cards, now=now)
        if self.selection is CardSelection.NEW:
            return scheduler.select_new(cards)
        return scheduler.select_by_interval(cards, self.interval or 0, session=self.done)

    def candidates(self, now: datetime | None = None) -> list[Card]:
        """
        Cards a draw picks from.

        At most ``draw_limit`` cards are returned. Larger selections are cut
        down to the cards with the highest correct streaks, in card order
        within each streak.
        """
        cards = self._select(now)
        if len(cards) <= self.draw_limit:
            return cards
        return _highest_streak_subset(cards, self.draw_limit)

    def draw(self, rng: random.Random | None = None, now: datetime | None = None) -> Card:
        """
        Pick a random card to study next.

        Raises:
            NoCardsAvailableError: If the selection is empty
        """
        cards = self.candidates(now)
        if not cards:
            raise NoCardsAvailableError()
        return (rng or random).choice(cards)

    def summary(self, now: datetime | None = None) -> str:
        """Progress line such as "due or new: 12 done: 3"."""
        count = len(self._select(now))
        return f"{self.label}: {count} done: {self.done.completed_count}"

    def record(
        self,
        fingerprint: Fingerprint | str,
        outcome: ReviewOutcome,
        reviewed_at: datetime | None = None,
    ) -> Card:
        """
        Record the answer for a drawn card.

        Args:
            fingerprint: Fingerprint of the answered card
            outcome: Correct, incorrect or skipped
            reviewed_at: Review time for spaced-repetition sessions

        Returns:
            The answered card

        Raises:
            CardNotFoundError: If the card set has no card with the fingerprint
        """
        card = self.card_set.find_card(fingerprint)
        if outcome is ReviewOutcome.SKIP:
            return card

        correct = outcome is ReviewOutcome.CORRECT
        if self.spaced_repetition:
            self.card_set.review(card.fingerprint, correct, reviewed_at)
            if correct and scheduler.interval(card) > 0:
                self.done.mark_completed(card)
        elif correct:
            self.done.mark_completed(card)

        logger.debug(
            "card_answered",
            card_set_id=self.card_set.id.value,
            card_id=card.id.value,
            outcome=outcome.value,
            correct_streak=card.correct_streak,
        )
        return card
