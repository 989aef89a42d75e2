"""
Runtime configuration helpers for the FastAPI application.

Loads DATABASE_URL, session and upstream provider settings from the
environment, falling back to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)

IN_MEMORY_DATABASE_URL = "sqlite+pysqlite:///:memory:"


class Settings(BaseSettings):
    database_url: str = Field(default=IN_MEMORY_DATABASE_URL, alias="DATABASE_URL")

    app_name: str = Field(default="Moodwave", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Sessions
    session_secret: str | None = Field(default=None, alias="SESSION_SECRET")
    session_max_age_seconds: int = Field(default=24 * 60 * 60, alias="SESSION_MAX_AGE_SECONDS")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    # Upstream music catalog / OAuth provider
    spotify_client_id: str | None = Field(default=None, alias="SPOTIFY_CLIENT_ID")
    spotify_client_secret: str | None = Field(default=None, alias="SPOTIFY_CLIENT_SECRET")
    spotify_redirect_uri: str = Field(default="http://localhost:8000/api/auth/callback", alias="SPOTIFY_REDIRECT_URI")
    spotify_accounts_url: str = Field(default="https://accounts.spotify.com", alias="SPOTIFY_ACCOUNTS_URL")
    spotify_api_base: str = Field(default="https://api.spotify.com/v1", alias="SPOTIFY_API_BASE")
    upstream_timeout_seconds: float = Field(default=10.0, alias="UPSTREAM_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origin_list(self) -> list[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["IN_MEMORY_DATABASE_URL", "Settings", "get_settings"]
