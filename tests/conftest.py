"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
import structlog

from cardfile.config import get_settings

# Fixed reference time for scheduling tests
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep CARDFILE_ environment variables and cached settings out of tests."""
    for name in (
        "CARDFILE_CARDS_ROOT",
        "CARDFILE_DEFINITION_SUFFIX",
        "CARDFILE_PROGRESS_SUFFIX",
        "CARDFILE_DRAW_LIMIT",
        "CARDFILE_REMAP_RULES_FILENAME",
        "CARDFILE_ENVIRONMENT",
        "CARDFILE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo logging configuration done by the code under test."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Write a text file, creating parent directories."""

    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
