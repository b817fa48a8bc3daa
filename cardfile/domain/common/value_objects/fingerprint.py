"""
Fingerprint value object for card references.

Used as an opaque handle for a card so raw card ids never need to be
round-tripped through a form or URL.
"""

import hashlib
from dataclasses import dataclass
from typing import Self

from ..value_object import ValueObject

_FINGERPRINT_LENGTH = 64


@dataclass(frozen=True)
class Fingerprint(ValueObject):
    """
    SHA-256 digest of a card id.

    A pure function of the id, so it is stable across reloads and runs.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Fingerprint cannot be empty")

        if len(self.value) != _FINGERPRINT_LENGTH:
            raise ValueError("Fingerprint must be 64 character hex string (SHA-256)")

        try:
            int(self.value, 16)
        except ValueError as err:
            raise ValueError("Fingerprint must be valid hexadecimal string") from err

    def __str__(self) -> str:
        return self.value

    @classmethod
    def compute(cls, card_id: str) -> Self:
        """
        Compute the fingerprint of a card id.

        Args:
            card_id: Trimmed, non-empty card id

        Returns:
            Fingerprint instance with computed digest
        """
        if not card_id:
            raise ValueError("Cannot compute fingerprint of empty card id")

        digest = hashlib.sha256(card_id.encode("utf-8")).hexdigest()
        return cls(digest)
