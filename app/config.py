"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Reelmark", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./reelmark.db", alias="DATABASE_URL"
    )

    session_cookie_name: str = Field(
        default="reelmark_session", alias="SESSION_COOKIE_NAME"
    )
    session_ttl_seconds: int = Field(
        default=7 * 24 * 3_600, alias="SESSION_TTL", ge=60
    )
    session_cookie_secure: bool = Field(
        default=False, alias="SESSION_COOKIE_SECURE"
    )

    selected_bookmark_limit: int = Field(
        default=5, alias="SELECTED_BOOKMARK_LIMIT", ge=1, le=100
    )
    catalog_path: Path | None = Field(default=None, alias="CATALOG_PATH")

    api_base_url: HttpUrl = Field(
        default="http://localhost:3000", alias="API_BASE_URL"
    )
    api_timeout_seconds: float = Field(default=10.0, alias="API_TIMEOUT", gt=0)

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("session_cookie_name")
    @classmethod
    def _validate_cookie_name(cls, value: str) -> str:
        """Reject cookie names that browsers would silently drop."""

        cleaned = value.strip()
        if not cleaned or any(char in cleaned for char in " ;,="):
            raise ValueError("SESSION_COOKIE_NAME must be a non-empty cookie token")
        return cleaned

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
