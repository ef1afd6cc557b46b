"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
The only mandatory value is the store connection string (DATABASE_URL);
everything else has a working default for local development.

Usage:
    from delivery_api.core.config import get_settings

    settings = get_settings()
    url = settings.require_database_url()
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from delivery_api.core.exceptions import ConfigurationError


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local work, interactive docs enabled
        PRODUCTION: Live environment, interactive docs disabled
        STAGING: Pre-production
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        api_port: Port for the API server
        cors_origin: The single origin allowed to call the API

        # Database
        database_url: Store connection string (required)
        db_echo: Log every SQL statement
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Delivery Orders API",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3001,
        description="API server port"
    )
    cors_origin: str = Field(
        default="http://localhost:3000",
        description="Origin allowed to make credentialed cross-origin requests"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy connection URL (postgresql+psycopg://...)"
    )
    db_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )
    db_pool_size: int = Field(
        default=5,
        description="Connection pool size"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Extra connections allowed when the pool is full"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("database_url", mode="before")
    @classmethod
    def blank_database_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty DATABASE_URL the same as an unset one."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def require_database_url(self) -> str:
        """
        Return the store connection string.

        Raises:
            ConfigurationError: If DATABASE_URL is not set
        """
        if not self.database_url:
            raise ConfigurationError("Database URL not found in environment variables (DATABASE_URL).")
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process; call ``get_settings.cache_clear()``
    after changing the environment (tests do this).
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("delivery_api")
