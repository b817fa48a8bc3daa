"""
Spaced-repetition scheduling.

Pure functions over a card's review state (correct streak and last review
time) and a fixed interval table. Blank cards are never selected for study.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from cardfile.domain.common.value_objects import Fingerprint
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.value_objects import SetStatistics

# Review interval in days, indexed by correct streak. The first three
# positions are 0: the card is still new and not yet scheduled.
INTERVALS: tuple[int, ...] = (0, 0, 0, 1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233, 377)

# Distinct interval values in table order, e.g. for histogram columns.
INTERVAL_VALUES: tuple[int, ...] = tuple(dict.fromkeys(INTERVALS))


def interval(card: Card) -> int:
    """Interval in days for the card's streak; long streaks clamp to the last entry."""
    return INTERVALS[min(card.correct_streak, len(INTERVALS) - 1)]


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def is_due(card: Card, now: datetime | None = None) -> bool:
    """
    Check whether a card is due for review.

    New cards (interval 0) are never due. Scheduled cards become due once
    interval * 24 hours have passed since their last review.

    Args:
        card: Card to check
        now: Reference time, defaults to the current UTC time

    Returns:
        True if the card is due
    """
    days = interval(card)
    if days == 0:
        return False
    elapsed = _resolve_now(now) - card.last_reviewed
    return elapsed >= timedelta(days=days)


@dataclass
class DrillSession:
    """
    Cards completed during one drill (non spaced-repetition) session.

    Drill answers never touch a card's review state, so the session keeps
    track of finished cards by fingerprint and the selection queries
    leave them out.
    """

    completed: set[Fingerprint] = field(default_factory=set)

    def mark_completed(self, card: Card) -> None:
        self.completed.add(card.fingerprint)

    def is_completed(self, card: Card) -> bool:
        return card.fingerprint in self.completed

    @property
    def completed_count(self) -> int:
        return len(self.completed)


def _studyable(cards: Iterable[Card], session: DrillSession | None) -> Iterator[Card]:
    for card in cards:
        if card.is_blank:
            continue
        if session is not None and session.is_completed(card):
            continue
        yield card


def select_all(cards: Iterable[Card], *, session: DrillSession | None = None) -> list[Card]:
    """All non-blank cards."""
    return list(_studyable(cards, session))


def select_due_or_new(
    cards: Iterable[Card],
    *,
    now: datetime | None = None,
    session: DrillSession | None = None,
) -> list[Card]:
    """Non-blank cards that are new or due."""
    now = _resolve_now(now)
    return [card for card in _studyable(cards, session) if interval(card) == 0 or is_due(card, now)]


def select_due(
    cards: Iterable[Card],
    *,
    now: datetime | None = None,
    session: DrillSession | None = None,
) -> list[Card]:
    """Non-blank cards that are due."""
    now = _resolve_now(now)
    return [card for card in _studyable(cards, session) if is_due(card, now)]


def select_new(cards: Iterable[Card], *, session: DrillSession | None = None) -> list[Card]:
    """Non-blank cards that have not been scheduled yet."""
    return [card for card in _studyable(cards, session) if interval(card) == 0]


def select_by_interval(
    cards: Iterable[Card],
    days: int,
    *,
    session: DrillSession | None = None,
) -> list[Card]:
    """Non-blank cards whose current interval is exactly ``days``."""
    return [card for card in _studyable(cards, session) if interval(card) == days]


def compute_statistics(
    cards: Iterable[Card],
    card_set_id: str = "",
    now: datetime | None = None,
) -> SetStatistics:
    """
    Aggregate counts over a card set's cards.

    Orphaned cards are only counted in ``total`` and ``orphaned``. Blank
    defined cards are only counted in ``total``, ``defined`` and ``blank``.

    Args:
        cards: Cards of one card set
        card_set_id: Logical id to label the statistics with
        now: Reference time for due checks, defaults to the current UTC time

    Returns:
        SetStatistics for the cards
    """
    now = _resolve_now(now)
    stats = SetStatistics(card_set_id=card_set_id)

    for card in cards:
        stats.total += 1
        if not card.defined_in_file:
            stats.orphaned += 1
            continue
        stats.defined += 1
        if card.is_blank:
            stats.blank += 1
            continue

        days = interval(card)
        stats.interval_histogram[days] = stats.interval_histogram.get(days, 0) + 1
        if days == 0:
            stats.new += 1
        elif is_due(card, now):
            stats.due += 1

    return stats
