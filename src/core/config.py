"""Central runtime configuration for the store gateway."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    env: str = "development"
    log_level: str = "INFO"
    app_name: str = "store_gateway"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def _validate(settings: Settings) -> Settings:
    if not settings.redis_host.strip():
        raise ValueError("REDIS_HOST must not be empty.")
    if settings.redis_port <= 0 or settings.redis_port > 65535:
        raise ValueError("REDIS_PORT must be between 1 and 65535.")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return validated settings as a cached singleton."""

    return _validate(Settings())
