"""
Configuration management for Court Scheduler.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./data/court_scheduler.db",
        description="Database connection URL"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )
    api_reload: bool = Field(
        default=True,
        description="Enable auto-reload in development"
    )

    # Slot grid used by calendar views
    slot_granularity_minutes: int = Field(
        default=30,
        gt=0,
        description="Length of one calendar slot in minutes"
    )
    operating_window_start: str = Field(
        default="06:00",
        description="First bookable time of day (HH:mm)"
    )
    operating_window_end: str = Field(
        default="23:00",
        description="End of the last bookable slot (HH:mm)"
    )

    # Write serialization
    booking_lock_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Maximum wait for the per-court booking lock"
    )

    # Read retries (idempotent paths only)
    read_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for read-only queries on transient database errors"
    )
    read_retry_delay_seconds: float = Field(
        default=0.1,
        ge=0,
        description="Delay between read retries"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("operating_window_start", "operating_window_end")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        if not HHMM_PATTERN.match(v):
            raise ValueError(f"'{v}' is not a valid HH:mm time")
        return v

    @model_validator(mode="after")
    def validate_operating_window(self) -> "Settings":
        if self.operating_window_end <= self.operating_window_start:
            raise ValueError("operating_window_end must be after operating_window_start")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    @property
    def uses_postgresql(self) -> bool:
        """Check if PostgreSQL is the configured database."""
        return "postgresql" in self.database_url.lower()

    @property
    def uses_sqlite(self) -> bool:
        """Check if SQLite is the configured database."""
        return "sqlite" in self.database_url.lower()

    def validate_production_config(self) -> None:
        """
        Validate configuration for production environment.

        Raises:
            ValueError: If required production settings are missing or invalid
        """
        if not self.is_production:
            return

        errors = []

        if not self.uses_postgresql:
            errors.append(
                "Production requires PostgreSQL. "
                "Set DATABASE_URL to a PostgreSQL connection string."
            )

        if self.api_reload:
            errors.append("API_RELOAD must be disabled in production.")

        if errors:
            raise ValueError("Production configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.
    Use this function throughout the application to access settings.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from court_scheduler.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.slot_granularity_minutes)
    """
    return Settings()
