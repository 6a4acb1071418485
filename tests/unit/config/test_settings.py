"""Tests for Settings configuration class."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestSettingsDefaults:
    """Test that Settings loads sensible defaults."""

    def test_settings_loads_with_defaults(self, monkeypatch):
        """Settings should load default values when no env vars are set."""
        monkeypatch.delenv("DB_PATH", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        from src.config.settings import Settings

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.db_path == Path("./data/talent_match.db")
        assert settings.log_level == "INFO"


class TestSettingsFromEnvironment:
    """Test that Settings reads from environment variables."""

    def test_settings_reads_db_path_from_env(self, monkeypatch, tmp_path):
        """DB_PATH should override the database location."""
        monkeypatch.setenv("DB_PATH", str(tmp_path / "scores.db"))

        from src.config.settings import Settings

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.db_path == tmp_path / "scores.db"

    def test_log_level_is_normalized(self, monkeypatch):
        """Lowercase levels are accepted and upper-cased."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        from src.config.settings import Settings

        assert Settings(_env_file=None).log_level == "DEBUG"  # type: ignore[call-arg]

    def test_invalid_log_level_raises(self, monkeypatch):
        """Unknown levels are rejected."""
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        from src.config.settings import Settings

        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestSettingsSingleton:
    """Test get_settings / reset_settings."""

    def test_get_settings_is_cached(self):
        """get_settings returns the same instance until reset."""
        from src.config.settings import get_settings, reset_settings

        reset_settings()
        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first
        reset_settings()
