"""Protocol for the card set progress repository."""

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from cardfile.domain.learning.entities.card import Card
from cardfile.domain.learning.entities.card_set import CardSet


class ProgressRepositoryProtocol(Protocol):
    """Protocol for loading card sets and saving their progress."""

    def load_card_set(self, definition_path: Path, progress_path: Path) -> list[Card]:
        """
        Load cards from a definition file and merge in their progress.

        Args:
            definition_path: The card definition file
            progress_path: The progress file (may not exist yet)

        Returns:
            Cards in definition order, orphaned progress cards last
        """
        ...

    def save_progress(self, progress_path: Path, cards: Iterable[Card], clean: bool) -> int:
        """
        Write progress records for cards.

        Args:
            progress_path: The progress file to write
            cards: Cards to write records for
            clean: Skip orphaned cards

        Returns:
            Number of records written
        """
        ...

    def load(self, card_set: CardSet) -> CardSet:
        """Reload the cards of a card set."""
        ...

    def save(self, card_set: CardSet, clean: bool = False) -> int:
        """Write the progress file of a card set."""
        ...
