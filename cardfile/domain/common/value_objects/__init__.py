"""Common value objects shared across all domain modules."""

from .fingerprint import Fingerprint
from .ids import CardId, CardSetId

__all__ = [
    "CardId",
    "CardSetId",
    "Fingerprint",
]
