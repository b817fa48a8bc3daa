"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardfile.constants import (
    DEFINITION_SUFFIX,
    DRAW_LIMIT,
    PROGRESS_SUFFIX,
    REMAP_RULES_FILENAME,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="CARDFILE_", extra="ignore"
    )

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Card files
    CARDS_ROOT: Path = Path(".")
    REMAP_RULES_FILENAME: str = REMAP_RULES_FILENAME
    DEFINITION_SUFFIX: str = DEFINITION_SUFFIX
    PROGRESS_SUFFIX: str = PROGRESS_SUFFIX

    # Study sessions
    DRAW_LIMIT: int = DRAW_LIMIT

    def remap_rules_path(self, root: Path | None = None) -> Path:
        """Location of the remap rule file inside a cards root, CARDS_ROOT by default."""
        return (self.CARDS_ROOT if root is None else Path(root)) / self.REMAP_RULES_FILENAME

    @field_validator("DEFINITION_SUFFIX", mode="after")
    @classmethod
    def validate_definition_suffix(cls, value: str) -> str:
        """Definition suffix must look like a file extension."""
        if len(value) < 2 or not value.startswith("."):
            msg = "DEFINITION_SUFFIX must start with '.' and name an extension"
            raise ValueError(msg)
        return value

    @field_validator("PROGRESS_SUFFIX", mode="after")
    @classmethod
    def validate_progress_suffix(cls, value: str) -> str:
        """Progress suffix can not be empty or progress would overwrite definitions."""
        if not value:
            msg = "PROGRESS_SUFFIX can not be empty"
            raise ValueError(msg)
        return value

    @field_validator("DRAW_LIMIT", mode="after")
    @classmethod
    def validate_draw_limit(cls, value: int) -> int:
        if value < 1:
            msg = "DRAW_LIMIT must be positive"
            raise ValueError(msg)
        return value


def configure_logging(settings: Settings | None = None, *, force: bool = False) -> bool:
    """
    Route structlog through stdlib logging for the given settings.

    Production renders JSON lines; other environments render for a console.
    An application that already configured structlog is left alone unless
    ``force`` is set.

    Returns:
        True if logging was (re)configured
    """
    if structlog.is_configured() and not force:
        return False

    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger("cardfile").setLevel(level)

    renderer: Callable[..., Any] = (
        structlog.processors.JSONRenderer()
        if settings.ENVIRONMENT == "production"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
