"""Unit tests for Preferences."""

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from manchuapp.config import (
    API_KEY_ENV,
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    Preferences,
    TranslationConfig,
)


@pytest.fixture
def preferences(tmp_path, monkeypatch):
    """Preferences backed by a temporary INI file, with no key in the env."""
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    settings = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return Preferences(settings)


class TestPreferences:
    """Test cases for Preferences."""

    def test_defaults(self, preferences):
        """Test the defaults when nothing is stored."""
        config = preferences.translation_config()
        assert config == TranslationConfig(
            endpoint=DEFAULT_ENDPOINT,
            model=DEFAULT_MODEL,
            api_key=None,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
        )
        assert preferences.database_path() is None

    def test_save_and_read(self, preferences):
        """Test stored values are read back."""
        preferences.save_translation_config(
            TranslationConfig(
                endpoint="https://translate.example/v1",
                model="other",
                api_key="stored",
                timeout_seconds=10,
            )
        )
        config = preferences.translation_config()
        assert config.endpoint == "https://translate.example/v1"
        assert config.model == "other"
        assert config.api_key == "stored"
        assert config.timeout_seconds == 10

    def test_environment_key_wins(self, preferences, monkeypatch):
        """Test the environment variable overrides the stored key."""
        preferences.save_translation_config(TranslationConfig(api_key="stored"))
        monkeypatch.setenv(API_KEY_ENV, "from-env")
        assert preferences.translation_config().api_key == "from-env"

    def test_environment_key_is_not_stored(self, preferences, monkeypatch):
        """Test saving does not copy the environment key into the settings."""
        monkeypatch.setenv(API_KEY_ENV, "from-env")
        preferences.save_translation_config(TranslationConfig(api_key="from-env"))
        monkeypatch.delenv(API_KEY_ENV)
        assert preferences.translation_config().api_key is None

    def test_database_path(self, preferences, tmp_path):
        """Test the database path round-trips and can be reset."""
        preferences.set_database_path(tmp_path / "corpus.db")
        assert preferences.database_path() == Path(tmp_path / "corpus.db")
        preferences.set_database_path(None)
        assert preferences.database_path() is None

    def test_blank_key_clears_stored_key(self, preferences):
        """Test saving without a key removes the stored one."""
        preferences.save_translation_config(TranslationConfig(api_key="secret"))
        assert preferences.translation_config().api_key == "secret"
        preferences.save_translation_config(TranslationConfig(api_key=None))
        assert preferences.translation_config().api_key is None
