"""
CardSet aggregate root.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from cardfile.domain.common.aggregate_root import AggregateRoot
from cardfile.domain.common.value_objects import CardSetId, Fingerprint
from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.events import CardReviewed
from cardfile.domain.learning.exceptions import CardNotFoundError
from cardfile.domain.learning.services.scheduler import compute_statistics
from cardfile.domain.learning.value_objects import CardSetBinding, SetStatistics


@dataclass(eq=False)
class CardSet(AggregateRoot[CardSetId]):
    """
    Card set aggregate root.

    One definition file paired with its progress file.

    Business Rules:
    - Cards are kept in definition order, orphaned progress cards last
    - Cards are replaced wholesale on every load
    - Every review records a CardReviewed event; pending events mean
      the progress file is out of date
    """

    id: CardSetId
    definition_path: Path
    progress_path: Path
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def from_binding(cls, binding: CardSetBinding) -> "CardSet":
        """Create an unloaded card set for a discovered binding."""
        return cls(
            id=CardSetId(binding.logical_id),
            definition_path=binding.definition_path,
            progress_path=binding.progress_path,
        )

    @property
    def has_unsaved_progress(self) -> bool:
        return bool(self._events)

    @property
    def orphaned_cards(self) -> list[Card]:
        return [card for card in self.cards if not card.defined_in_file]

    def replace_cards(self, cards: list[Card]) -> None:
        """Replace all cards with freshly loaded ones."""
        self.cards = list(cards)

    def find_card(self, fingerprint: Fingerprint | str) -> Card:
        """
        Find a card by fingerprint.

        Args:
            fingerprint: Fingerprint value object or its hex string

        Returns:
            The matching card

        Raises:
            CardNotFoundError: If no card has the fingerprint
        """
        wanted = str(fingerprint)
        for card in self.cards:
            if card.fingerprint.value == wanted:
                return card
        raise CardNotFoundError(wanted)

    def review(
        self,
        fingerprint: Fingerprint | str,
        correct: bool,
        reviewed_at: datetime | None = None,
    ) -> Card:
        """
        Record a spaced-repetition review of one card.

        Args:
            fingerprint: Fingerprint of the reviewed card
            correct: Whether it was answered correctly
            reviewed_at: Review time, defaults to now (UTC)

        Returns:
            The updated card

        Raises:
            CardNotFoundError: If no card has the fingerprint
        """
        card = self.find_card(fingerprint)
        card.record_review(correct, reviewed_at or datetime.now(UTC))
        self._record_event(
            CardReviewed(
                card_set_id=self.id,
                card_id=card.id,
                correct=correct,
                correct_streak=card.correct_streak,
            )
        )
        return card

    def statistics(self, now: datetime | None = None) -> SetStatistics:
        return compute_statistics(self.cards, card_set_id=self.id.value, now=now)
