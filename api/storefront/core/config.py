"""Application settings parsed from environment variables and defaults."""

import json
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Storefront Admin"
    environment: str = "development"
    api_prefix: str = "/api"

    # Base URL of the commerce REST backend (NEXT_PUBLIC_API_BASE_URL upstream).
    api_base_url: str = "http://localhost:5000/api/v1"
    backend_timeout_seconds: float = 15.0
    backend_read_attempts: int = 3

    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    test_database_url: Optional[str] = None

    log_level: str = "INFO"
    cors_origins: list[str] | str = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())

    max_tags: int = 20
    max_service_images: int = 5
    favorites_schema_version: int = 1

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS origins from JSON, CSV, or list inputs."""
        if isinstance(value, list):
            cleaned = [origin.strip() for origin in value if isinstance(origin, str) and origin.strip()]
            return cleaned or DEFAULT_CORS_ORIGINS.copy()
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return DEFAULT_CORS_ORIGINS.copy()
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                cleaned = [str(origin).strip() for origin in parsed if str(origin).strip()]
                if cleaned:
                    return cleaned
            origins = [origin.strip() for origin in stripped.split(",") if origin.strip()]
            if origins:
                return origins
        return DEFAULT_CORS_ORIGINS.copy()

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Store the backend base URL without a trailing slash."""
        return value.strip().rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()
