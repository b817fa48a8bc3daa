"""Use case for pruning orphaned progress records."""

from pathlib import Path

import structlog

from cardfile.application.learning.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from cardfile.config import get_settings

logger = structlog.get_logger(__name__)


class CleanProgressUseCase:
    """Rewrite a progress file without records for cards no longer defined."""

    def __init__(
        self,
        progress_repository: ProgressRepositoryProtocol,
        progress_suffix: str | None = None,
    ) -> None:
        self.progress_repository = progress_repository
        self.progress_suffix = progress_suffix or get_settings().PROGRESS_SUFFIX

    def clean(self, definition_path: Path, progress_path: Path | None = None) -> int:
        """
        Load a card set and save it back with orphaned records dropped.

        Args:
            definition_path: Card definition file
            progress_path: Progress file, defaults to the definition path
                followed by the progress suffix

        Returns:
            Number of records pruned

        Raises:
            FileNotFoundError: If the definition file does not exist
            CardParseError: If the definition file is malformed
            ProgressRecordError: If the progress file is malformed
        """
        definition_path = Path(definition_path)
        if progress_path is None:
            progress_path = definition_path.with_name(definition_path.name + self.progress_suffix)

        cards = self.progress_repository.load_card_set(definition_path, progress_path)
        kept = self.progress_repository.save_progress(progress_path, cards, clean=True)
        pruned = len(cards) - kept

        logger.info(
            "progress_cleaned",
            definition_path=str(definition_path),
            progress_path=str(progress_path),
            kept_count=kept,
            pruned_count=pruned,
        )
        return pruned
