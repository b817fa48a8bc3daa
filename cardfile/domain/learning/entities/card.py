"""
Card entity for spaced repetition learning.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from cardfile.domain.common.entity import Entity
from cardfile.domain.common.exceptions import ValidationError
from cardfile.domain.common.value_objects import CardId, Fingerprint

# Zero value for last_reviewed: the card has never been reviewed.
NEVER_REVIEWED = datetime(1, 1, 1, tzinfo=UTC)


@dataclass(eq=False)
class Card(Entity[CardId]):
    """
    One flashcard.

    Business Rules:
    - Id is non-blank and unique within its definition file
    - Fingerprint is derived from the id once, at construction
    - Correct streak is never negative
    - A card that only exists in the progress file is an orphan
      (defined_in_file is False) and has a blank front and back
    """

    id: CardId
    front: str = ""
    back: str = ""
    last_reviewed: datetime = NEVER_REVIEWED
    correct_streak: int = 0
    defined_in_file: bool = True
    fingerprint: Fingerprint = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate invariants and derive the fingerprint."""
        if self.correct_streak < 0:
            raise ValidationError(
                "Correct streak cannot be negative", field="correct_streak", value=self.correct_streak
            )
        if self.last_reviewed.tzinfo is None:
            self.last_reviewed = self.last_reviewed.replace(tzinfo=UTC)
        self.fingerprint = Fingerprint.compute(self.id.value)

    @property
    def is_blank(self) -> bool:
        """A card missing either side can not be studied."""
        return self.front == "" or self.back == ""

    @property
    def is_orphaned(self) -> bool:
        return not self.defined_in_file

    def record_review(self, correct: bool, reviewed_at: datetime) -> None:
        """
        Apply a spaced-repetition review outcome.

        Args:
            correct: Whether the card was answered correctly
            reviewed_at: When the review happened
        """
        if correct:
            self.correct_streak += 1
        else:
            self.correct_streak = 0
        if reviewed_at.tzinfo is None:
            reviewed_at = reviewed_at.replace(tzinfo=UTC)
        self.last_reviewed = reviewed_at

    def restore_progress(self, last_reviewed: datetime, correct_streak: int) -> None:
        """Overwrite review state with values read from a progress file."""
        if correct_streak < 0:
            raise ValidationError(
                "Correct streak cannot be negative", field="correct_streak", value=correct_streak
            )
        if last_reviewed.tzinfo is None:
            last_reviewed = last_reviewed.replace(tzinfo=UTC)
        self.last_reviewed = last_reviewed
        self.correct_streak = correct_streak

    @classmethod
    def create(cls, id: str, front: str, back: str) -> "Card":
        """Create a card defined in a card file."""
        return cls(id=CardId(id), front=front, back=back)

    @classmethod
    def orphan(cls, id: str, last_reviewed: datetime, correct_streak: int) -> "Card":
        """Create a card for progress data whose id is no longer defined."""
        return cls(
            id=CardId(id),
            last_reviewed=last_reviewed,
            correct_streak=correct_streak,
            defined_in_file=False,
        )
