"""Learning module domain exceptions."""

from pathlib import Path

from cardfile.domain.common.exceptions import DomainError, EntityNotFoundError


class CardParseError(DomainError):
    """Raised when a card definition file violates the card file grammar."""

    def __init__(self, reason: str, line_number: int, path: Path | None = None) -> None:
        self.reason = reason
        self.line_number = line_number
        self.path = path
        message = f"{reason} on line {line_number}"
        if path is not None:
            message = f"Unable to load card file {path}: {message}"
        super().__init__(message)

    def with_path(self, path: Path) -> "CardParseError":
        """Return a copy of this error that names the file it came from."""
        return CardParseError(self.reason, self.line_number, path)


class ProgressRecordError(DomainError):
    """Raised when a progress file contains a malformed record."""

    def __init__(self, path: Path, line_number: int, reason: str) -> None:
        self.path = path
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Invalid record in progress file {path} on line {line_number}: {reason}")


class DiscoveryError(DomainError):
    """Raised when card set discovery fails; no partial result is returned."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class CardNotFoundError(EntityNotFoundError):
    """Raised when no card in a card set has the requested fingerprint."""

    def __init__(self, fingerprint: object) -> None:
        super().__init__("Card", fingerprint)
        self.fingerprint = fingerprint


class CardSetNotFoundError(EntityNotFoundError):
    """Raised when no card set has the requested logical id."""

    def __init__(self, card_set_id: object) -> None:
        super().__init__("Card set", card_set_id)
        self.card_set_id = card_set_id


class NoCardsAvailableError(DomainError):
    """Raised when a study session has no cards left to draw."""

    def __init__(self) -> None:
        super().__init__("No cards found")
