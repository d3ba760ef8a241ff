"""Pydantic schemas for schedule templates.

A template is immutable catalog data: a recurrence definition plus an
ordered list of wall-clock time slots. The recurrence is a closed variant
discriminated by ``pattern``; each variant carries only the fields its
pattern uses.
"""

from __future__ import annotations

from datetime import time
from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator, model_validator

from channel_scheduler.models.enums import RecurrencePattern, TemplateCategory
from channel_scheduler.schemas.base import BaseSchema

MINUTES_PER_DAY = 24 * 60

WeekdayNumber = Annotated[int, Field(ge=0, le=6)]
"""Day of week, 0=Sunday .. 6=Saturday."""


class _FrozenSchema(BaseSchema):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        frozen=True,
    )


# =============================================================================
# Recurrence Variants
# =============================================================================


class DailyRecurrence(_FrozenSchema):
    """Every date in range, optionally without Saturdays and Sundays."""

    pattern: Literal["daily"] = "daily"
    exclude_weekends: bool = False


class WeeklyRecurrence(_FrozenSchema):
    """Dates whose weekday is a member of ``days_of_week``.

    An empty set selects no dates.
    """

    pattern: Literal["weekly"] = "weekly"
    days_of_week: frozenset[WeekdayNumber] = frozenset()


class MonthlyRecurrence(_FrozenSchema):
    """The ``day_of_month``-th of every month where that date exists.

    Without a ``day_of_month`` no dates are selected.
    """

    pattern: Literal["monthly"] = "monthly"
    day_of_month: int | None = Field(None, ge=1, le=31)


Recurrence = Annotated[
    DailyRecurrence | WeeklyRecurrence | MonthlyRecurrence,
    Field(discriminator="pattern"),
]


# =============================================================================
# Time Slots
# =============================================================================


class TimeSlot(_FrozenSchema):
    """One wall-clock slot of a template.

    ``start_time``/``end_time`` are offsets within a day (``HH:MM``), not
    instants. A slot whose end is not after its start runs past midnight
    and ends on the following day. The slot is the blueprint of a Program,
    which is resolved per tenant when the template is applied.
    """

    id: str = Field(..., min_length=1)
    start_time: time = Field(..., examples=["06:00"])
    end_time: time = Field(..., examples=["07:00"])
    program_title: str = Field(..., min_length=1, max_length=255)
    program_description: str | None = None
    program_category: str | None = None
    is_live: bool = False
    is_new: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_wall_clock(cls, v: time) -> time:
        """Slots are minute-precision and zone-free."""
        if v.tzinfo is not None:
            raise ValueError("slot times are wall-clock offsets without timezone")
        return v.replace(second=0, microsecond=0)

    @model_validator(mode="after")
    def validate_not_empty(self) -> TimeSlot:
        """A slot must cover a non-empty span."""
        if self.start_time == self.end_time:
            raise ValueError("slot start_time and end_time must differ")
        return self

    @property
    def crosses_midnight(self) -> bool:
        """Whether the slot ends on the day after it starts."""
        return self.end_time <= self.start_time

    @property
    def duration_minutes(self) -> int:
        """Slot length in minutes, counting past midnight when needed."""
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return (end - start) % MINUTES_PER_DAY


# =============================================================================
# Template
# =============================================================================


class ScheduleTemplate(_FrozenSchema):
    """Named recurrence definition with ordered time slots.

    Accepts either a nested ``recurrence`` or the flat form
    ``{pattern, days_of_week, day_of_month, exclude_weekends}``.
    """

    id: str = Field(..., min_length=1, examples=["news-morning"])
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: TemplateCategory
    recurrence: Recurrence
    time_slots: tuple[TimeSlot, ...] = Field(..., min_length=1)
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def nest_flat_recurrence(cls, data: Any) -> Any:
        """Fold flat pattern fields into a ``recurrence`` mapping."""
        if not isinstance(data, dict) or "recurrence" in data or "pattern" not in data:
            return data

        data = dict(data)
        pattern = str(data.pop("pattern"))
        recurrence: dict[str, Any] = {"pattern": pattern}
        days_of_week = data.pop("days_of_week", None)
        day_of_month = data.pop("day_of_month", None)
        exclude_weekends = data.pop("exclude_weekends", None)

        if pattern == RecurrencePattern.DAILY.value and exclude_weekends is not None:
            recurrence["exclude_weekends"] = exclude_weekends
        elif pattern == RecurrencePattern.WEEKLY.value and days_of_week is not None:
            recurrence["days_of_week"] = days_of_week
        elif pattern == RecurrencePattern.MONTHLY.value and day_of_month is not None:
            recurrence["day_of_month"] = day_of_month

        data["recurrence"] = recurrence
        return data

    @field_validator("time_slots")
    @classmethod
    def validate_unique_slot_ids(cls, v: tuple[TimeSlot, ...]) -> tuple[TimeSlot, ...]:
        """Slot ids identify slots within their template."""
        ids = [slot.id for slot in v]
        if len(ids) != len(set(ids)):
            raise ValueError("time slot ids must be unique within a template")
        return v

    @property
    def pattern(self) -> RecurrencePattern:
        """Recurrence pattern of the template."""
        return RecurrencePattern(self.recurrence.pattern)

    @property
    def program_titles(self) -> list[str]:
        """Distinct slot program titles in first-seen order."""
        return list(dict.fromkeys(slot.program_title for slot in self.time_slots))


__all__ = [
    "DailyRecurrence",
    "MonthlyRecurrence",
    "Recurrence",
    "ScheduleTemplate",
    "TimeSlot",
    "WeeklyRecurrence",
]
