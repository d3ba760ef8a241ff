"""Pydantic schemas for validation.

This package contains the Pydantic models exchanged with callers of the
scheduling services. Exports all schemas for convenient importing.
"""

from channel_scheduler.schemas.base import BaseResponse, BaseSchema, UTCTimestamp
from channel_scheduler.schemas.schedule import (
    ScheduleCopyRequest,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
    SkippedCandidate,
    TemplateApplyRequest,
    TemplateApplyResult,
    TemplateApplyStats,
)
from channel_scheduler.schemas.template import (
    DailyRecurrence,
    MonthlyRecurrence,
    Recurrence,
    ScheduleTemplate,
    TimeSlot,
    WeeklyRecurrence,
)

__all__ = [
    "BaseResponse",
    "BaseSchema",
    "DailyRecurrence",
    "MonthlyRecurrence",
    "Recurrence",
    "ScheduleCopyRequest",
    "ScheduleCreate",
    "ScheduleResponse",
    "ScheduleTemplate",
    "ScheduleUpdate",
    "SkippedCandidate",
    "TemplateApplyRequest",
    "TemplateApplyResult",
    "TemplateApplyStats",
    "TimeSlot",
    "UTCTimestamp",
    "WeeklyRecurrence",
]
