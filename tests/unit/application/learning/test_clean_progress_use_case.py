"""Tests for the clean progress use case."""

from pathlib import Path

from cardfile.application.learning.use_cases.clean_progress_use_case import (
    CleanProgressUseCase,
)
from cardfile.infrastructure.learning.repositories.progress_repository import (
    ProgressRepository,
)


class TestCleanProgressUseCase:
    def test_prunes_orphaned_records(self, tmp_path: Path, write_file) -> None:
        definition_path = write_file(tmp_path / "deck.cd", "q1 | a\n")
        progress_path = write_file(
            tmp_path / "deck.cdd",
            "q1 | 2024-01-01T00:00:00Z | 2\ngone | 2024-01-02T00:00:00Z | 5\n",
        )
        use_case = CleanProgressUseCase(ProgressRepository())

        pruned = use_case.clean(definition_path)

        assert pruned == 1
        assert progress_path.read_text(encoding="utf-8") == "q1 | 2024-01-01T00:00:00Z | 2\n"

    def test_explicit_progress_path(self, tmp_path: Path, write_file) -> None:
        definition_path = write_file(tmp_path / "deck.cd", "q1 | a\nq2 | b\n")
        progress_path = tmp_path / "progress" / "deck.txt"
        use_case = CleanProgressUseCase(ProgressRepository(), progress_suffix="d")

        pruned = use_case.clean(definition_path, progress_path)

        assert pruned == 0
        assert progress_path.read_text(encoding="utf-8").count("\n") == 2
