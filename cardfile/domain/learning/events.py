"""Domain events for the learning context."""

from dataclasses import dataclass

from cardfile.domain.common.domain_event import DomainEvent
from cardfile.domain.common.value_objects import CardId, CardSetId


@dataclass(frozen=True, kw_only=True)
class CardReviewed(DomainEvent):
    """A card's review state changed and its progress needs saving."""

    card_set_id: CardSetId
    card_id: CardId
    correct: bool
    correct_streak: int
