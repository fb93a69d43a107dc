"""Centralized settings management for The Scene toolkit."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from scene.errors import MissingCredentialError

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """
    Runtime settings powered by pydantic-settings.

    Values come from environment variables, then from ``.env`` and
    ``.env.local`` in the project root (later files win).
    """

    # -------------------------------------------------------------------------
    # SOURCE API KEYS
    # -------------------------------------------------------------------------
    GOOGLE_API_KEY: SecretStr | None = None

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(
        env_file=(
            str(PROJECT_ROOT / ".env"),
            str(PROJECT_ROOT / ".env.local"),
        ),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def require_google_api_key(self) -> str:
        """
        Return the Google API key or fail before any network call.

        Raises
        ------
        MissingCredentialError
            If GOOGLE_API_KEY is unset or blank.
        """
        if self.GOOGLE_API_KEY is None:
            raise MissingCredentialError("GOOGLE_API_KEY is not set.")
        value = self.GOOGLE_API_KEY.get_secret_value().strip()
        if not value:
            raise MissingCredentialError("GOOGLE_API_KEY is empty.")
        return value


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
