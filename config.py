"""
Configuration settings for the korkort progress service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="KORKORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Local Storage
    # ========================================
    storage_path: Path = Field(
        default=Path.home() / ".korkort" / "state.db",
        description="SQLite file backing the local key-value store",
    )

    # ========================================
    # Remote Progress Service (GraphQL)
    # ========================================
    api_graphql_url: str = Field(
        default="http://127.0.0.1:20002/graphql",
        description="GraphQL endpoint of the remote progress service",
    )
    api_key: str = Field(
        default="",
        description="Bearer token sent with every GraphQL request",
    )
    remote_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for remote progress calls",
    )

    # ========================================
    # Connectivity
    # ========================================
    connectivity_probe_url: str = Field(
        default="https://www.gstatic.com/generate_204",
        description="URL probed to decide whether the device is online",
    )
    connectivity_timeout_seconds: float = Field(
        default=3.0,
        description="Timeout for the connectivity probe",
    )
    offline_mode: bool = Field(
        default=False,
        description="Never contact the remote service",
    )

    # ========================================
    # Study Reminders
    # ========================================
    reminder_hour: int = Field(
        default=20,
        ge=0,
        le=23,
        description="Local wall-clock hour for daily and streak reminders",
    )
    reminder_timezone: str | None = Field(
        default=None,
        description="IANA timezone for reminders (e.g. Europe/Stockholm); system local time if unset",
    )
    minutes_per_lesson: int = Field(
        default=5,
        description="Study minutes credited per completed lesson",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def has_remote_configured(self) -> bool:
        """Check if the remote progress service can be used at all."""
        return bool(self.api_graphql_url) and not self.offline_mode


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
