"""
Tests for configuration module.
"""

import os
from pathlib import Path

import pytest

from ng_i18n_extract.config import Settings, get_settings, reset_settings
from ng_i18n_extract.utils.errors import ConfigurationError, InvalidOptionError


class TestSettings:
    """Test the Settings configuration class."""

    def test_default_settings(self):
        """Test default settings initialization."""
        settings = Settings()

        assert settings.src_path == Path("./src")
        assert settings.output_path == Path("./i18n/messages.json")
        assert settings.locale == "en"
        assert settings.key_prefix == "app"
        assert settings.component_context is True
        assert settings.max_slug_length == 30
        assert settings.replace is False
        assert settings.exclude_ts is False
        assert settings.log_level == "INFO"

    def test_settings_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("NG_I18N_KEY_PREFIX", "shop")
        monkeypatch.setenv("NG_I18N_REPLACE", "true")
        monkeypatch.setenv("NG_I18N_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.key_prefix == "shop"
        assert settings.replace is True
        assert settings.log_level == "DEBUG"

    def test_overrides_win_over_env(self, monkeypatch):
        """Test that explicit values beat the environment, and None falls through."""
        monkeypatch.setenv("NG_I18N_LOCALE", "de")
        monkeypatch.setenv("NG_I18N_KEY_PREFIX", "shop")

        settings = Settings.from_env(locale="fr", key_prefix=None)

        assert settings.locale == "fr"
        assert settings.key_prefix == "shop"

    def test_env_file(self, tmp_path):
        """Test loading variables from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("NG_I18N_LOCALE=pt-BR\n", encoding="utf-8")

        try:
            settings = Settings.from_env(env_file)
        finally:
            os.environ.pop("NG_I18N_LOCALE", None)

        assert settings.locale == "pt-BR"

    @pytest.mark.parametrize(
        "option, value",
        [
            ("key_prefix", "App Prefix"),
            ("key_prefix", "1app"),
            ("locale", "english!"),
            ("max_slug_length", 5),
            ("log_level", "LOUD"),
        ],
    )
    def test_invalid_options(self, option, value):
        """Test that validation failures surface as configuration errors."""
        with pytest.raises(InvalidOptionError) as exc_info:
            Settings.create(**{option: value})

        assert exc_info.value.details["option"] == option
        assert isinstance(exc_info.value, ConfigurationError)

    def test_dotted_key_prefix(self):
        assert Settings(key_prefix="app.admin").key_prefix == "app.admin"

    def test_log_file_path_creation(self, tmp_path):
        """Test log file path directory creation."""
        log_path = tmp_path / "logs" / "extract.log"
        settings = Settings(log_file_path=log_path)

        # Directory should not exist yet
        assert not log_path.parent.exists()

        result = settings.get_log_file_path()

        assert result == log_path
        assert log_path.parent.exists()

    def test_no_log_file(self):
        assert Settings().get_log_file_path() is None

    def test_get_settings_singleton(self):
        """Test that get_settings returns the same instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_reset_settings(self, monkeypatch):
        """Test that reset_settings picks up a changed environment."""
        first = get_settings()
        monkeypatch.setenv("NG_I18N_LOCALE", "es")
        reset_settings()

        second = get_settings()

        assert second is not first
        assert second.locale == "es"
