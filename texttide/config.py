# texttide/config.py
"""
Centralized application configuration using pydantic-settings.

All settings are read from environment variables or .env file.
Switching storage backends or moving the data file only needs .env changes.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Priority: environment variables > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    # --- Storage ---
    STORAGE_BACKEND: Literal["file", "sql"] = Field(
        default="file",
        description="Where clipboard items live: a JSON file or PostgreSQL"
    )
    DATA_FILE: str = Field(
        default=os.path.join("data", "clipboard.json"),
        description="JSON store location (relative paths resolve from project root)"
    )
    DB_URL: str = Field(
        default="postgresql://localhost:5432/texttide",
        description="PostgreSQL connection URL (sql backend only)"
    )

    # --- Clipboard rules ---
    RETENTION_DAYS: int = Field(
        default=30,
        ge=1,
        description="Days an item stays visible before it expires"
    )
    TOP_LIKED_LIMIT: int = Field(
        default=3,
        ge=1,
        description="Default size of the top liked list"
    )

    # --- Server ---
    HOST: str = Field(
        default="127.0.0.1",
        description="Server bind host"
    )
    PORT: int = Field(
        default=8888,
        description="Server bind port"
    )

    # --- Debug / Logging ---
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # --- Tracing ---
    TRACING_ENABLED: bool = Field(
        default=False,
        description="Export OpenTelemetry spans to the console"
    )
    SERVICE_NAME: str = Field(
        default="texttide",
        description="service.name resource attribute for traces"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v_upper


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings()


# --- Singleton instance for easy import ---
settings = get_settings()


# --- Module-level exports ---

# Storage
STORAGE_BACKEND: str = settings.STORAGE_BACKEND
DATABASE_URL: str = settings.DB_URL
RETENTION_DAYS: int = settings.RETENTION_DAYS
TOP_LIKED_LIMIT: int = settings.TOP_LIKED_LIMIT

# Server
HOST: str = settings.HOST
PORT: int = settings.PORT
DEBUG: bool = settings.DEBUG
LOG_LEVEL: str = settings.LOG_LEVEL

# Tracing
TRACING_ENABLED: bool = settings.TRACING_ENABLED
SERVICE_NAME: str = settings.SERVICE_NAME

# --- Paths (computed, not from env) ---
PROJECT_ROOT: str = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LOGS_PATH: str = os.path.join(PROJECT_ROOT, "logs")
DATA_PATH: str = (
    settings.DATA_FILE
    if os.path.isabs(settings.DATA_FILE)
    else os.path.join(PROJECT_ROOT, settings.DATA_FILE)
)
