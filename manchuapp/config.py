"""Application preferences, stored with QSettings."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

from PySide6.QtCore import QSettings

#: Environment variable holding the translation service credential.
API_KEY_ENV: Final[str] = "DEEPSEEK_API_KEY"
#: Default chat-completion endpoint.
DEFAULT_ENDPOINT: Final[str] = "https://api.deepseek.com/v1/chat/completions"
#: Default model name.
DEFAULT_MODEL: Final[str] = "deepseek-chat"
#: Default request timeout in seconds.
DEFAULT_TIMEOUT_SECONDS: Final[int] = 60


@dataclass(frozen=True)
class TranslationConfig:
    """Settings for the translation service."""

    #: Chat-completion endpoint URL.
    endpoint: str = DEFAULT_ENDPOINT
    #: Model name sent with each request.
    model: str = DEFAULT_MODEL
    #: Bearer token.
    api_key: str | None = None
    #: Request timeout in seconds.
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


class Preferences:
    """
    Typed access to the values kept in QSettings.

    Keyword Args:
        settings: Settings object to use; the application's default
            QSettings if omitted

    """

    def __init__(self, settings: QSettings | None = None) -> None:
        self.settings = settings if settings is not None else QSettings()

    def translation_config(self) -> TranslationConfig:
        """
        Build the translation settings.

        The credential comes from the ``DEEPSEEK_API_KEY`` environment variable
        and falls back to the stored preference.

        Returns:
            Translation settings

        """
        endpoint = cast(
            "str",
            self.settings.value("translation/endpoint", DEFAULT_ENDPOINT, type=str),
        )
        model = cast(
            "str", self.settings.value("translation/model", DEFAULT_MODEL, type=str)
        )
        timeout = cast(
            "int",
            self.settings.value(
                "translation/timeout_seconds", DEFAULT_TIMEOUT_SECONDS, type=int
            ),
        )
        stored_key = cast(
            "str", self.settings.value("translation/api_key", "", type=str)
        )
        api_key = os.environ.get(API_KEY_ENV) or stored_key or None
        return TranslationConfig(
            endpoint=endpoint or DEFAULT_ENDPOINT,
            model=model or DEFAULT_MODEL,
            api_key=api_key,
            timeout_seconds=int(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS,
        )

    def save_translation_config(self, config: TranslationConfig) -> None:
        """
        Store translation settings.  The API key is only stored when it was
        not taken from the environment, and a blank key removes the stored one.
        """
        self.settings.setValue("translation/endpoint", config.endpoint)
        self.settings.setValue("translation/model", config.model)
        self.settings.setValue("translation/timeout_seconds", config.timeout_seconds)
        if config.api_key and config.api_key != os.environ.get(API_KEY_ENV):
            self.settings.setValue("translation/api_key", config.api_key)
        elif not config.api_key:
            self.settings.remove("translation/api_key")

    def database_path(self) -> Path | None:
        """
        Get the configured corpus database path.

        Returns:
            The path, or None to use the platform default

        """
        value = cast("str", self.settings.value("database/path", "", type=str))
        return Path(value) if value else None

    def set_database_path(self, path: Path | None) -> None:
        """Store the corpus database path; None restores the default."""
        self.settings.setValue("database/path", str(path) if path else "")
