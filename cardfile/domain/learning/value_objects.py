"""Value objects for the learning context."""

from dataclasses import dataclass, field
from pathlib import Path

from cardfile.domain.common.value_object import ValueObject


@dataclass(frozen=True)
class RemapRule(ValueObject):
    """
    Maps a card file or a directory of card files from outside the
    cards root into the logical id namespace.

    Attributes:
        external_root: Directory the sub path is relative to
        sub_path: A single card file or a directory to walk
        rename: Replaces sub_path in logical ids and progress paths
    """

    external_root: Path
    sub_path: str
    rename: str | None = None

    def __post_init__(self) -> None:
        if not self.sub_path:
            raise ValueError("RemapRule sub path cannot be empty")
        if self.rename == "":
            object.__setattr__(self, "rename", None)

    @property
    def source(self) -> Path:
        """Location of the remapped file or directory."""
        return self.external_root / self.sub_path

    @property
    def target(self) -> str:
        """Path the remapped cards appear under in the logical namespace."""
        return self.rename or self.sub_path

    def names_single_file(self, definition_suffix: str) -> bool:
        return self.sub_path.endswith(definition_suffix)


@dataclass(frozen=True)
class CardSetBinding(ValueObject):
    """A logical card set id bound to its definition and progress files."""

    logical_id: str
    definition_path: Path
    progress_path: Path


@dataclass
class SetStatistics:
    """Aggregated counts over one card set's cards."""

    card_set_id: str = ""
    total: int = 0
    defined: int = 0
    blank: int = 0
    new: int = 0
    due: int = 0
    orphaned: int = 0
    interval_histogram: dict[int, int] = field(default_factory=dict)

    def histogram_row(self, interval_values: tuple[int, ...]) -> list[int]:
        """
        Counts for each interval value, zero-filled, in table order.

        Args:
            interval_values: Distinct interval values to report on

        Returns:
            One count per interval value
        """
        return [self.interval_histogram.get(value, 0) for value in interval_values]
