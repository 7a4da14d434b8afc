"""Service settings loaded from environment variables and an optional .env file."""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    app_title: str = "catalog-service (in-memory)"
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8085
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # exposes POST /reset for demos and tests
    enable_reset: bool = True

    # where the SDK and terminal client point by default
    base_url: str = "http://127.0.0.1:8085"


@lru_cache
def get_settings() -> Settings:
    return Settings()
