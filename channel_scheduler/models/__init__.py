"""SQLAlchemy models.

This package contains all database models.
"""

from channel_scheduler.models.base import Base, TimestampMixin, UUIDMixin
from channel_scheduler.models.channel import Channel
from channel_scheduler.models.enums import RecurrencePattern, TemplateCategory, Weekday
from channel_scheduler.models.program import Program
from channel_scheduler.models.schedule import NO_OVERLAP_CONSTRAINT, Schedule

__all__ = [
    # Base classes
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    # Enums
    "RecurrencePattern",
    "TemplateCategory",
    "Weekday",
    # Models
    "Channel",
    "Program",
    "Schedule",
    "NO_OVERLAP_CONSTRAINT",
]
