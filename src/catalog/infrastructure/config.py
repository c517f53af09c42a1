"""Application configuration: environment-driven settings via pydantic-settings.

Every key can be set with a ``CATALOG_`` prefixed environment variable or
in a ``.env`` file; ``get_settings()`` is cached, one instance per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"

    # Observability
    log_level: str = "INFO"
    log_format: Literal["plain", "json"] = "plain"

    # Authoritative store
    store_backend: Literal["json", "sql"] = "json"
    data_dir: Path = Path("data")
    database_url: str = "sqlite:///./data/catalog.db"

    # Cache
    cache_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = Field(default=2.0, gt=0)
    redis_connect_timeout: float = Field(default=2.0, gt=0)
    redis_max_connections: int = Field(default=10, ge=1)

    # Detached cache cleanup after deletes
    cleanup_timeout_seconds: float = Field(default=5.0, gt=0)
    cleanup_workers: int = Field(default=2, ge=1)

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
