# log_ingestor/core/config.py
"""
Central configuration for the log ingestor service.

This module defines a single `settings` object (Pydantic BaseSettings) that reads
configuration from environment variables and a local `.env` file.

Guiding principles:
- Config is declared once, imported everywhere.
- Sensible defaults for local dev.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and optional `.env`.

    `.env` is resolved relative to the directory uvicorn is started from.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -----------------------
    # Runtime
    # -----------------------
    ENV: str = Field(default="dev", description="Environment: dev|test|prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (e.g., INFO, DEBUG)")

    # -----------------------
    # API / CORS
    # -----------------------
    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # -----------------------
    # Request limits
    # -----------------------
    MAX_BODY_KB: int = Field(
        default=256,
        ge=1,
        le=10240,
        description="Max request body size in kilobytes for ingestion",
    )

    @property
    def MAX_BODY_BYTES(self) -> int:
        """Derived body size limit in bytes."""
        return int(self.MAX_BODY_KB) * 1024

    # -----------------------
    # Error mapping
    # -----------------------
    # Existing clients expect 400 for "no logs found"; 404 is the opt-in alternative.
    NOT_FOUND_STATUS_CODE: int = Field(
        default=400,
        description="HTTP status returned when a lookup or single-criterion search finds nothing",
    )

    # -----------------------
    # Storage
    # -----------------------
    STORE_BACKEND: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Log store implementation: sqlite (durable) or memory (process lifetime)",
    )

    # Async SQLAlchemy URL for SQLite (aiosqlite driver).
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/logs.db",
        description="SQLAlchemy async database URL",
    )

    # -----------------------
    # Validators / normalizers
    # -----------------------
    @field_validator("ENV")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return (v or "dev").strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @field_validator("STORE_BACKEND", mode="before")
    @classmethod
    def _normalize_backend(cls, v: str) -> str:
        return (v or "sqlite").strip().lower()

    @field_validator("NOT_FOUND_STATUS_CODE")
    @classmethod
    def _check_not_found_status(cls, v: int) -> int:
        if v not in (400, 404):
            raise ValueError("NOT_FOUND_STATUS_CODE must be 400 or 404")
        return v

    @field_validator("CORS_ALLOW_ORIGINS")
    @classmethod
    def _clean_cors_origins(cls, v: List[str]) -> List[str]:
        cleaned = []
        for origin in v or []:
            o = (origin or "").strip()
            if o:
                cleaned.append(o)
        return cleaned

    @field_validator("DATABASE_URL")
    @classmethod
    def _strip_strings(cls, v: str) -> str:
        return (v or "").strip()


# Singleton instance imported across the codebase.
settings = Settings()
