"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- Defaults to SQLite (file-based) for easy local development
- All short links live in one serialized blob under STORAGE_KEY
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )

    # Database Configuration
    # For SQLite: sqlite+aiosqlite:///./shortlinks.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shortlinks.db",
        description="Database connection string for the key/value blob store"
    )
    STORAGE_KEY: str = Field(
        default="shortened-urls",
        description="Key under which the serialized short link list is persisted"
    )

    # Application Configuration
    BASE_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL for generating short URLs"
    )

    # Short Code Configuration
    SHORT_CODE_LENGTH: int = Field(
        default=6,
        ge=1,
        description="Length of randomly generated short codes (base-36)"
    )
    DEFAULT_VALIDITY_MINUTES: int = Field(
        default=30,
        ge=1,
        description="Validity used when a request omits it or gives a non-positive value"
    )
    MAX_GENERATION_ATTEMPTS: int = Field(
        default=1000,
        ge=1,
        description="Random code candidates tried before giving up with CodeSpaceExhaustedError"
    )

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Enable per-IP rate limiting on API endpoints"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )


settings = Settings()
