"""Pydantic schemas for schedules and bulk template application.

This module defines the records exchanged with callers of the scheduling
core: single-schedule create/update/copy inputs, the schedule record
returned by every write, and the report produced by template application.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, model_validator

from channel_scheduler.schemas.base import BaseResponse, BaseSchema, UTCTimestamp

# =============================================================================
# Schedule Input Schemas
# =============================================================================


class ScheduleCreate(BaseSchema):
    """Input for creating a single schedule.

    Interval ordering (``start_time < end_time``) is checked by the
    service so that it is reported as a scheduling ValidationError.
    """

    channel_id: UUID = Field(
        ...,
        description="Channel the program airs on",
    )
    program_id: UUID = Field(
        ...,
        description="Program being aired",
    )
    start_time: UTCTimestamp = Field(
        ...,
        description="Inclusive start instant (ISO-8601)",
        examples=["2024-01-01T06:00:00Z"],
    )
    end_time: UTCTimestamp = Field(
        ...,
        description="Exclusive end instant (ISO-8601)",
        examples=["2024-01-01T07:00:00Z"],
    )
    is_live: bool = Field(default=False, description="Broadcast live")
    is_new: bool = Field(default=False, description="First airing of an episode")
    is_repeat: bool = Field(default=False, description="Re-run of an earlier airing")


class ScheduleUpdate(BaseSchema):
    """Partial update of a schedule. Omitted fields keep their value."""

    channel_id: UUID | None = Field(
        default=None,
        description="Move the schedule to another channel",
    )
    program_id: UUID | None = Field(
        default=None,
        description="Air a different program",
    )
    start_time: UTCTimestamp | None = Field(
        default=None,
        description="New inclusive start instant",
    )
    end_time: UTCTimestamp | None = Field(
        default=None,
        description="New exclusive end instant",
    )
    is_live: bool | None = None
    is_new: bool | None = None
    is_repeat: bool | None = None

    @property
    def changes_placement(self) -> bool:
        """Whether the update touches the channel or the interval."""
        return any(
            value is not None
            for value in (self.channel_id, self.start_time, self.end_time)
        )


class ScheduleCopyRequest(BaseSchema):
    """Input for copying a schedule.

    Every field is optional: the default copy lands 24 hours later on the
    same channel with the source's duration.
    """

    new_start_time: UTCTimestamp | None = Field(
        default=None,
        description="Start of the copy; defaults to source start + 24h",
    )
    new_end_time: UTCTimestamp | None = Field(
        default=None,
        description="End of the copy; defaults to new start + source duration",
    )
    channel_id: UUID | None = Field(
        default=None,
        description="Target channel; defaults to the source channel",
    )


# =============================================================================
# Schedule Response Schemas
# =============================================================================


class ScheduleResponse(BaseResponse):
    """Schedule record returned by every schedule write and read."""

    channel_id: UUID
    program_id: UUID
    start_time: datetime
    end_time: datetime
    is_live: bool
    is_new: bool
    is_repeat: bool


# =============================================================================
# Template Application Schemas
# =============================================================================


class TemplateApplyRequest(BaseSchema):
    """Input for applying a catalog template to a channel."""

    template_id: str = Field(
        ...,
        min_length=1,
        description="Catalog template id",
        examples=["news-morning"],
    )
    channel_id: UUID = Field(
        ...,
        description="Target channel",
    )
    start_date: date = Field(
        ...,
        description="First calendar date of the range (inclusive)",
        examples=["2024-01-01"],
    )
    end_date: date = Field(
        ...,
        description="Last calendar date of the range (inclusive)",
        examples=["2024-01-31"],
    )
    timezone: str | None = Field(
        default=None,
        description="IANA zone anchoring slot wall-clock times",
        examples=["Europe/London"],
    )

    @model_validator(mode="after")
    def validate_date_range(self) -> TemplateApplyRequest:
        """Reject inverted date ranges."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TemplateApplyStats(BaseSchema):
    """Candidate counts of one template application."""

    total: int = Field(..., ge=0, description="Candidates generated")
    created: int = Field(..., ge=0, description="Candidates persisted")
    failed: int = Field(..., ge=0, description="Candidates skipped on conflict")


class SkippedCandidate(BaseSchema):
    """A candidate that was not persisted because its slot was taken."""

    program_title: str
    start_time: datetime
    end_time: datetime
    conflicting_schedule_id: UUID | None = Field(
        default=None,
        description="Schedule occupying the interval, when known",
    )


class TemplateApplyResult(BaseSchema):
    """Report of a bulk template application.

    A partial failure is a normal outcome: ``success`` stays true and the
    skipped candidates are counted in ``stats.failed``.
    """

    success: bool = True
    message: str
    created_schedules: list[ScheduleResponse] = Field(default_factory=list)
    skipped: list[SkippedCandidate] = Field(default_factory=list)
    stats: TemplateApplyStats


__all__ = [
    "ScheduleCopyRequest",
    "ScheduleCreate",
    "ScheduleResponse",
    "ScheduleUpdate",
    "SkippedCandidate",
    "TemplateApplyRequest",
    "TemplateApplyResult",
    "TemplateApplyStats",
]
