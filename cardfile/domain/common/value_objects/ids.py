from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class CardId(EntityId):
    """Card identifier, unique within one definition file."""

    value: str

    def __post_init__(self) -> None:
        if not self.value.strip(" \t"):
            raise ValueError("CardId cannot be empty")


@dataclass(frozen=True)
class CardSetId(EntityId):
    """Logical card set identifier, forward-slash separated."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("CardSetId cannot be empty")
