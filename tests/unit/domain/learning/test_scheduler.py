"""Tests for spaced-repetition scheduling."""

from datetime import datetime, timedelta

import pytest

from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.services.scheduler import (
    INTERVAL_VALUES,
    INTERVALS,
    DrillSession,
    compute_statistics,
    interval,
    is_due,
    select_all,
    select_by_interval,
    select_due,
    select_due_or_new,
    select_new,
)


def _card(card_id: str, streak: int = 0, reviewed: datetime | None = None, back: str = "back") -> Card:
    card = Card.create(card_id, "front", back)
    if reviewed is not None or streak:
        card.restore_progress(reviewed or card.last_reviewed, streak)
    return card


class TestIntervals:
    def test_table(self) -> None:
        assert INTERVALS == (0, 0, 0, 1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233, 377)
        assert INTERVAL_VALUES == (0, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144, 233, 377)

    @pytest.mark.parametrize(("streak", "days"), [(0, 0), (2, 0), (3, 1), (5, 2), (16, 377), (1000, 377)])
    def test_interval_by_streak(self, streak: int, days: int) -> None:
        assert interval(_card("q", streak)) == days


class TestIsDue:
    def test_new_card_is_never_due(self, now: datetime) -> None:
        assert not is_due(_card("q"), now)

    def test_due_once_interval_has_passed(self, now: datetime) -> None:
        assert is_due(_card("q", 3, now - timedelta(days=1)), now)
        assert not is_due(_card("q", 3, now - timedelta(hours=23)), now)

    def test_one_day_interval_boundaries(self, now: datetime) -> None:
        assert not is_due(_card("q", 3, now - timedelta(hours=12)), now)
        assert is_due(_card("q", 3, now - timedelta(hours=24)), now)

    def test_new_card_is_not_due_however_old(self, now: datetime) -> None:
        assert not is_due(_card("q", 2, now - timedelta(days=1000)), now)

    def test_long_interval(self, now: datetime) -> None:
        assert not is_due(_card("q", 10, now - timedelta(days=20)), now)
        assert is_due(_card("q", 10, now - timedelta(days=21)), now)


class TestSelections:
    @pytest.fixture
    def cards(self, now: datetime) -> list[Card]:
        return [
            _card("new"),
            _card("due", 3, now - timedelta(days=2)),
            _card("waiting", 5, now),
            _card("blank", back=""),
        ]

    @staticmethod
    def _ids(cards: list[Card]) -> list[str]:
        return [card.id.value for card in cards]

    def test_select_all_skips_blank(self, cards: list[Card]) -> None:
        assert self._ids(select_all(cards)) == ["new", "due", "waiting"]

    def test_select_due_or_new(self, cards: list[Card], now: datetime) -> None:
        assert self._ids(select_due_or_new(cards, now=now)) == ["new", "due"]

    def test_select_due(self, cards: list[Card], now: datetime) -> None:
        assert self._ids(select_due(cards, now=now)) == ["due"]

    def test_select_new(self, cards: list[Card]) -> None:
        assert self._ids(select_new(cards)) == ["new"]

    def test_select_by_interval(self, cards: list[Card]) -> None:
        assert self._ids(select_by_interval(cards, 2)) == ["waiting"]
        assert select_by_interval(cards, 8) == []

    def test_drill_session_excludes_completed(self, cards: list[Card]) -> None:
        session = DrillSession()
        session.mark_completed(cards[0])

        assert self._ids(select_all(cards, session=session)) == ["due", "waiting"]
        assert session.completed_count == 1


class TestComputeStatistics:
    def test_counts(self, now: datetime) -> None:
        cards = [
            _card("new"),
            _card("due", 3, now - timedelta(days=2)),
            _card("waiting", 5, now),
            _card("blank", back=""),
            Card.orphan("gone", now, 9),
        ]

        stats = compute_statistics(cards, card_set_id="spanish/verbs", now=now)

        assert stats.card_set_id == "spanish/verbs"
        assert stats.total == 5
        assert stats.defined == 4
        assert stats.blank == 1
        assert stats.new == 1
        assert stats.due == 1
        assert stats.orphaned == 1
        assert stats.interval_histogram == {0: 1, 1: 1, 2: 1}
        assert stats.histogram_row(INTERVAL_VALUES)[:4] == [1, 1, 1, 0]

    def test_empty(self) -> None:
        stats = compute_statistics([])
        assert stats.total == 0
        assert stats.interval_histogram == {}
