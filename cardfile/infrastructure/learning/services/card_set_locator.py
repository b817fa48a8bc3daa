"""Infrastructure service for finding card sets on disk."""

import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

import structlog

from cardfile.constants import DEFINITION_SUFFIX, PROGRESS_SUFFIX
from cardfile.domain.learning.exceptions import DiscoveryError
from cardfile.domain.learning.value_objects import CardSetBinding, RemapRule

logger = structlog.get_logger(__name__)


def _raise_walk_error(error: OSError) -> None:
    raise error


class CardSetLocator:
    """
    Finds card sets under a cards root and through remap rules.

    Every definition file becomes a binding from a logical id (its path
    relative to the cards root, or to the remapped location, with "/"
    separators and the definition suffix removed) to its definition file
    and progress file. Progress for remapped card sets is kept under the
    cards root, never next to the external files.
    """

    def __init__(
        self,
        definition_suffix: str = DEFINITION_SUFFIX,
        progress_suffix: str = PROGRESS_SUFFIX,
    ) -> None:
        self.definition_suffix = definition_suffix
        self.progress_suffix = progress_suffix

    def discover(
        self, root: Path, remap_rules: Iterable[RemapRule] = ()
    ) -> list[CardSetBinding]:
        """
        Discover all card sets.

        Args:
            root: Cards root to walk; remapped progress files live under it too
            remap_rules: Rules processed in order after the local walk

        Returns:
            Bindings sorted by logical id

        Raises:
            DiscoveryError: If walking fails, a remapped location is missing,
                a card file has no name before its suffix or two card sets
                share a logical id; no partial result is returned
        """
        root = Path(root)
        try:
            bindings = list(self._find_local(root))
            local_count = len(bindings)
            for rule in remap_rules:
                bindings.extend(self._find_remote(root, rule))
        except OSError as e:
            raise DiscoveryError(f"Unable to discover card sets: {e}", path=root) from e

        bindings.sort(key=lambda binding: binding.logical_id)
        self._check_logical_ids(bindings)
        logger.info(
            "card_sets_discovered",
            root=str(root),
            local_count=local_count,
            remote_count=len(bindings) - local_count,
        )
        return bindings

    def _check_logical_ids(self, bindings: list[CardSetBinding]) -> None:
        # Bindings are sorted, so clashing ids are adjacent
        previous: CardSetBinding | None = None
        for binding in bindings:
            if not binding.logical_id or binding.logical_id.endswith("/"):
                raise DiscoveryError(
                    f"Card file {binding.definition_path} has no name before its suffix",
                    path=binding.definition_path,
                )
            if previous is not None and previous.logical_id == binding.logical_id:
                raise DiscoveryError(
                    f"Card set id '{binding.logical_id}' is used by both "
                    f"{previous.definition_path} and {binding.definition_path}",
                    path=binding.definition_path,
                )
            previous = binding

    def _walk(self, directory: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(directory, onerror=_raise_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(self.definition_suffix):
                    yield Path(dirpath) / filename

    def _logical_id(self, path: PurePosixPath) -> str:
        return path.as_posix().removesuffix(self.definition_suffix)

    def _progress_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.progress_suffix)

    def _find_local(self, root: Path) -> Iterator[CardSetBinding]:
        for definition_path in self._walk(root):
            relative = PurePosixPath(definition_path.relative_to(root).as_posix())
            yield CardSetBinding(
                logical_id=self._logical_id(relative),
                definition_path=definition_path,
                progress_path=self._progress_path(definition_path),
            )

    def _find_remote(self, root: Path, rule: RemapRule) -> Iterator[CardSetBinding]:
        target = PurePosixPath(rule.target.replace(os.sep, "/"))

        if rule.names_single_file(self.definition_suffix):
            if not rule.source.is_file():
                raise DiscoveryError(f"Remapped card file {rule.source} not found", path=rule.source)
            if not target.name.endswith(self.definition_suffix):
                target = target.with_name(target.name + self.definition_suffix)
            yield CardSetBinding(
                logical_id=self._logical_id(target),
                definition_path=rule.source,
                progress_path=self._progress_path(root / target),
            )
            return

        for definition_path in self._walk(rule.source):
            relative = definition_path.relative_to(rule.source).as_posix()
            logical_path = target / relative
            yield CardSetBinding(
                logical_id=self._logical_id(logical_path),
                definition_path=definition_path,
                progress_path=self._progress_path(root / logical_path),
            )


def discover_card_sets(root: Path, remap_rules: Iterable[RemapRule] = ()) -> list[CardSetBinding]:
    """Discover card sets with the default file suffixes."""
    return CardSetLocator().discover(root, remap_rules)
