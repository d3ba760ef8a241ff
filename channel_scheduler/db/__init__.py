"""Database module.

This module provides database session management and engine configuration.
"""

from channel_scheduler.db.session import (
    async_database_url,
    async_session,
    build_engine,
    build_session_factory,
    engine,
    session_scope,
)

__all__ = [
    "async_database_url",
    "async_session",
    "build_engine",
    "build_session_factory",
    "engine",
    "session_scope",
]
