"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion.  Every key uses
the ``JANVANI_`` prefix and may also be supplied through a ``.env`` file.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class StorageBackendKind(StrEnum):
    MEMORY = "memory"
    FILE = "file"


class Settings(BaseSettings):
    """Central configuration for the Janvani portal core.

    Environment variables are loaded from a ``.env`` file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="JANVANI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "console"

    # ── Snapshot storage ───────────────────────────────────────────────
    storage_backend: StorageBackendKind = StorageBackendKind.FILE
    storage_dir: str = ".janvani"
    storage_namespace: str = ""
    seed_on_first_load: bool = True

    # ── Complaint workflow ─────────────────────────────────────────────
    strict_status_transitions: bool = True

    # ── Dashboards ─────────────────────────────────────────────────────
    recent_complaints_limit: int = Field(default=5, ge=1)
    top_categories_limit: int = Field(default=3, ge=1)

    # ── Derived Properties ─────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION


# Module-level singleton: import ``settings`` everywhere.
settings = Settings()
