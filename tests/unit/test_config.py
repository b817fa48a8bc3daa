"""Tests for application settings."""

from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from cardfile.config import Settings, configure_logging, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.CARDS_ROOT == Path(".")
        assert settings.DEFINITION_SUFFIX == ".cd"
        assert settings.PROGRESS_SUFFIX == "d"
        assert settings.DRAW_LIMIT == 10
        assert settings.LOG_LEVEL == "INFO"
        assert settings.remap_rules_path() == Path("cardFiles")

    def test_remap_rules_path_in_other_root(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, REMAP_RULES_FILENAME="rules")

        assert settings.remap_rules_path(tmp_path) == tmp_path / "rules"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("CARDFILE_CARDS_ROOT", str(tmp_path))
        monkeypatch.setenv("CARDFILE_DRAW_LIMIT", "3")

        settings = Settings(_env_file=None)

        assert settings.CARDS_ROOT == tmp_path
        assert settings.DRAW_LIMIT == 3

    @pytest.mark.parametrize(
        "overrides",
        [{"DEFINITION_SUFFIX": "cd"}, {"DEFINITION_SUFFIX": "."}, {"PROGRESS_SUFFIX": ""}, {"DRAW_LIMIT": 0}],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestConfigureLogging:
    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [("production", structlog.processors.JSONRenderer), ("development", structlog.dev.ConsoleRenderer)],
    )
    def test_renderer_by_environment(self, environment: str, renderer: type) -> None:
        assert configure_logging(Settings(_env_file=None, ENVIRONMENT=environment))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], renderer)

    def test_existing_configuration_is_kept(self) -> None:
        structlog.configure(processors=[structlog.processors.KeyValueRenderer()])

        assert not configure_logging(Settings(_env_file=None, ENVIRONMENT="production"))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.KeyValueRenderer)

    def test_force_reconfigures(self) -> None:
        structlog.configure(processors=[structlog.processors.KeyValueRenderer()])

        assert configure_logging(Settings(_env_file=None, ENVIRONMENT="production"), force=True)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="LOUD")
