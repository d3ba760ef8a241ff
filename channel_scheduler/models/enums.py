"""Domain enum definitions.

This module defines the enum types shared by the models, schemas and
services of the scheduling core.
"""

from enum import Enum


class RecurrencePattern(str, Enum):
    """Recurrence pattern of a schedule template.

    Each pattern selects which variant of the recurrence definition
    applies: daily (optionally skipping weekends), weekly (by weekday
    set) or monthly (by day of month).
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class TemplateCategory(str, Enum):
    """Catalog category of a schedule template."""

    NEWS = "news"
    ENTERTAINMENT = "entertainment"
    SPORTS = "sports"
    MOVIES = "movies"
    KIDS = "kids"
    MUSIC = "music"
    EDUCATIONAL = "educational"
    RELIGIOUS = "religious"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class Weekday(int, Enum):
    """Day of week numbering used by recurrence definitions.

    Sunday is 0 and Saturday is 6.
    """

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date_weekday(cls, python_weekday: int) -> "Weekday":
        """Convert ``date.weekday()`` (Monday=0) to Sunday-based numbering."""
        return cls((python_weekday + 1) % 7)

    @property
    def is_weekend(self) -> bool:
        """Saturday and Sunday."""
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)


__all__ = [
    "RecurrencePattern",
    "TemplateCategory",
    "Weekday",
]
