"""Application configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
All sensitive values should be provided via environment variables.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Channel Scheduler"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str | None = None
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 30

    # Scheduling
    SCHEDULE_TIMEZONE: str = "UTC"
    COPY_DEFAULT_OFFSET_HOURS: int = 24
    TEMPLATE_MAX_RANGE_DAYS: int = 366

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # Defaults to logs/app.log
    LOG_JSON_FORMAT: bool = True  # Use JSON format for file logs

    @field_validator("SCHEDULE_TIMEZONE")
    @classmethod
    def validate_schedule_timezone(cls, v: str) -> str:
        """Reject timezone names unknown to the IANA database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("COPY_DEFAULT_OFFSET_HOURS", "TEMPLATE_MAX_RANGE_DAYS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Offsets and range limits must be positive."""
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @property
    def schedule_zone(self) -> ZoneInfo:
        """Zone used to anchor template wall-clock slots."""
        return ZoneInfo(self.SCHEDULE_TIMEZONE)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are cached after first load for performance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
