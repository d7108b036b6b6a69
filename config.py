"""
Configuration settings for the libregto poker tutor.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a LIBREGTO_-prefixed environment variable,
e.g. LIBREGTO_PROGRESS_PATH=/tmp/progress.json.
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
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LIBREGTO_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Persistence
    # ========================================
    progress_path: Path = Field(
        default=Path.home() / ".libregto" / "progress.json",
        description="JSON document holding unlock/completion progress",
    )
    curriculum_file: Path | None = Field(
        default=None,
        description="Optional JSON curriculum replacing the built-in one",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level for the stderr log sink",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional rotating log file (always DEBUG)",
    )

    # ========================================
    # Behaviour
    # ========================================
    strict_mode: bool = Field(
        default=False,
        description="Raise on unknown units and invalid engine transitions instead of logging",
    )
    rng_seed: int | None = Field(
        default=None,
        description="Seed for question generation (None = nondeterministic)",
    )
    speed_demon_ms: int = Field(
        default=2000,
        description="Average answer time (ms) under which the speed-demon badge is awarded",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
