"""Tests for study sessions."""

import random
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from cardfile.application.learning.services.study_session import (
    CardSelection,
    ReviewOutcome,
    StudySession,
    parse_selection,
)
from cardfile.domain.common.exceptions import ValidationError
from cardfile.domain.common.value_objects import CardSetId
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.entities.card_set import CardSet
from cardfile.domain.learning.exceptions import NoCardsAvailableError


def _card_set(cards: list[Card]) -> CardSet:
    return CardSet(
        id=CardSetId("deck"),
        definition_path=Path("deck.cd"),
        progress_path=Path("deck.cdd"),
        cards=cards,
    )


def _card(card_id: str, streak: int = 0, reviewed: datetime | None = None) -> Card:
    card = Card.create(card_id, f"front {card_id}", f"back {card_id}")
    if streak or reviewed is not None:
        card.restore_progress(reviewed or card.last_reviewed, streak)
    return card


class TestParseSelection:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            (None, (CardSelection.DUE_OR_NEW, None)),
            ("all", (CardSelection.ALL, None)),
            ("new", (CardSelection.NEW, None)),
            ("due", (CardSelection.DUE, None)),
            ("8", (CardSelection.INTERVAL, 8)),
        ],
    )
    def test_tokens(self, token: str | None, expected: tuple) -> None:
        assert parse_selection(token) == expected

    @pytest.mark.parametrize("token", ["later", "interval"])
    def test_unknown_token(self, token: str) -> None:
        with pytest.raises(ValidationError):
            parse_selection(token)


class TestCandidates:
    def test_interval_selection_needs_interval(self) -> None:
        with pytest.raises(ValidationError):
            StudySession(_card_set([]), CardSelection.INTERVAL)

    def test_small_selection_is_returned_whole(self, now: datetime) -> None:
        session = StudySession(_card_set([_card("a"), _card("b")]))
        assert [card.id.value for card in session.candidates(now)] == ["a", "b"]

    def test_large_selection_prefers_highest_streaks(self, now: datetime) -> None:
        cards = [_card(f"c{i}", i % 3) for i in range(12)]
        session = StudySession(_card_set(cards), CardSelection.DUE_OR_NEW)

        candidates = session.candidates(now)

        assert [card.id.value for card in candidates] == [
            "c2", "c5", "c8", "c11", "c1", "c4", "c7", "c10", "c0", "c3",
        ]

    def test_draw_limit(self, now: datetime) -> None:
        cards = [_card(f"c{i}") for i in range(5)]
        session = StudySession(_card_set(cards), CardSelection.ALL, draw_limit=2)

        assert len(session.candidates(now)) == 2

    def test_draw_picks_a_candidate(self, now: datetime) -> None:
        cards = [_card("a"), _card("b"), _card("c")]
        session = StudySession(_card_set(cards), CardSelection.ALL)

        card = session.draw(random.Random(7), now)

        assert card in cards

    def test_draw_with_nothing_due(self, now: datetime) -> None:
        session = StudySession(_card_set([_card("a")]), CardSelection.DUE)

        with pytest.raises(NoCardsAvailableError, match="No cards found"):
            session.draw(now=now)

    def test_summary(self, now: datetime) -> None:
        cards = [_card("a"), _card("b", 5, now - timedelta(days=1))]

        assert StudySession(_card_set(cards)).summary(now) == "due or new: 1 done: 0"
        assert StudySession(_card_set(cards), CardSelection.INTERVAL, 2).summary(now) == (
            "interval 2 day(s): 1 done: 0"
        )


class TestSpacedRepetitionRecording:
    def test_correct_updates_card_and_marks_unsaved(self, now: datetime) -> None:
        card_set = _card_set([_card("a")])
        session = StudySession(card_set, CardSelection.NEW)

        card = session.record(card_set.cards[0].fingerprint, ReviewOutcome.CORRECT, now)

        assert card.correct_streak == 1
        assert card.last_reviewed == now
        assert card_set.has_unsaved_progress
        # Still new, so it stays in the session
        assert session.done.completed_count == 0

    def test_correct_into_scheduled_interval_completes_card(self, now: datetime) -> None:
        card_set = _card_set([_card("a", 2)])
        session = StudySession(card_set, CardSelection.DUE_OR_NEW)

        session.record(card_set.cards[0].fingerprint, ReviewOutcome.CORRECT, now)

        assert session.done.completed_count == 1
        assert session.candidates(now) == []

    def test_incorrect_resets_streak(self, now: datetime) -> None:
        card_set = _card_set([_card("a", 6, now - timedelta(days=10))])
        session = StudySession(card_set, CardSelection.DUE)

        card = session.record(card_set.cards[0].fingerprint, ReviewOutcome.INCORRECT, now)

        assert card.correct_streak == 0
        assert card_set.has_unsaved_progress

    def test_skip_changes_nothing(self, now: datetime) -> None:
        card_set = _card_set([_card("a")])
        session = StudySession(card_set)

        session.record(card_set.cards[0].fingerprint, ReviewOutcome.SKIP, now)

        assert card_set.cards[0].correct_streak == 0
        assert not card_set.has_unsaved_progress


class TestDrillRecording:
    def test_correct_removes_card_from_drill(self, now: datetime) -> None:
        card_set = _card_set([_card("a"), _card("b")])
        session = StudySession(card_set, CardSelection.ALL)

        session.record(card_set.cards[0].fingerprint, ReviewOutcome.CORRECT)

        assert [card.id.value for card in session.candidates(now)] == ["b"]
        assert session.summary(now) == "all: 1 done: 1"
        assert card_set.cards[0].correct_streak == 0
        assert not card_set.has_unsaved_progress

    def test_incorrect_keeps_card_in_drill(self, now: datetime) -> None:
        card_set = _card_set([_card("a", 5, now)])
        session = StudySession(card_set, CardSelection.INTERVAL, 2)

        session.record(card_set.cards[0].fingerprint, ReviewOutcome.INCORRECT)

        assert len(session.candidates(now)) == 1
        assert card_set.cards[0].correct_streak == 5
