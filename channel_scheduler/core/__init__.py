"""Core application configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Error taxonomy (exceptions.py)
- Logging setup (logging.py)
"""

from channel_scheduler.core.config import Settings, get_settings, settings
from channel_scheduler.core.exceptions import (
    AppError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AppError",
    "ConflictError",
    "NotFoundError",
    "Settings",
    "ValidationError",
    "get_settings",
    "settings",
]
