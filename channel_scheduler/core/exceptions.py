"""Common exception classes.

This module defines the error taxonomy shared by every scheduling
component. Single-schedule operations raise these directly; bulk template
application downgrades ``ConflictError`` to a counted skip.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

# =============================================================================
# Base exception
# =============================================================================


class AppError(Exception):
    """Base class for application errors."""


# =============================================================================
# Validation
# =============================================================================


class ValidationError(AppError):
    """Raised when input is malformed.

    Covers inverted or empty intervals, incomplete recurrence definitions,
    bad date ranges and inactive templates. Never retried.

    Attributes:
        field: Name of the offending field, if one applies
        details: Extra diagnostic values

    Example:
        >>> raise ValidationError(
        ...     "End time must be after start time",
        ...     field="end_time",
        ...     details={"start": "...", "end": "..."},
        ... )
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.field = field
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Missing resources
# =============================================================================


class NotFoundError(AppError):
    """Raised when a referenced resource does not exist for the tenant.

    A resource owned by another tenant is reported the same way as a
    missing one.

    Attributes:
        resource_type: Kind of resource (channel, program, schedule, template)
        resource_id: Identifier that was looked up
    """

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type.capitalize()} '{resource_id}' not found")


# =============================================================================
# Overlap conflicts
# =============================================================================


class ConflictError(AppError):
    """Raised when an interval overlaps an existing schedule on the channel.

    Attributes:
        channel_id: Channel the write targeted
        start: Requested start (UTC)
        end: Requested end (UTC)
        conflicting_id: Id of the schedule already occupying the slot,
            None when the conflict was reported by the database constraint
        conflicting_start: Start of the occupying schedule
        conflicting_end: End of the occupying schedule

    Example:
        >>> raise ConflictError(
        ...     channel_id=channel.id,
        ...     start=start,
        ...     end=end,
        ...     conflicting_id=existing.id,
        ...     conflicting_start=existing.start_time,
        ...     conflicting_end=existing.end_time,
        ... )
    """

    def __init__(
        self,
        channel_id: Any,
        start: datetime,
        end: datetime,
        conflicting_id: Any = None,
        conflicting_start: datetime | None = None,
        conflicting_end: datetime | None = None,
    ) -> None:
        self.channel_id = channel_id
        self.start = start
        self.end = end
        self.conflicting_id = conflicting_id
        self.conflicting_start = conflicting_start
        self.conflicting_end = conflicting_end

        message = (
            f"Interval {start.isoformat()} - {end.isoformat()} on channel "
            f"'{channel_id}' overlaps an existing schedule"
        )
        if conflicting_id is not None:
            message += (
                f" '{conflicting_id}'"
                f" ({_iso(conflicting_start)} - {_iso(conflicting_end)})"
            )

        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return the conflict context as plain values."""
        return {
            "channel_id": str(self.channel_id),
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "conflicting_id": (
                str(self.conflicting_id) if self.conflicting_id is not None else None
            ),
            "conflicting_start": _iso(self.conflicting_start),
            "conflicting_end": _iso(self.conflicting_end),
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# =============================================================================
# Exports
# =============================================================================


__all__ = [
    "AppError",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
]
