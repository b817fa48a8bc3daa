"""Protocols for card set discovery."""

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from cardfile.domain.learning.value_objects import CardSetBinding, RemapRule


class CardSetLocatorProtocol(Protocol):
    """Protocol for finding card sets."""

    def discover(
        self, root: Path, remap_rules: Iterable[RemapRule] = ()
    ) -> list[CardSetBinding]:
        """
        Find all card sets under a root and through remap rules.

        Returns:
            Bindings sorted by logical id
        """
        ...


class RemapRuleRepositoryProtocol(Protocol):
    """Protocol for reading remap rules."""

    def load(self, path: Path) -> list[RemapRule]:
        """Load remap rules in file order; a missing file yields no rules."""
        ...
