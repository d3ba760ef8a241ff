"""Half-open interval overlap checks.

Two intervals ``[s1, e1)`` and ``[s2, e2)`` conflict iff
``s1 < e2 and s2 < e1``. Touching endpoints (``e1 == s2``) do not
conflict, so back-to-back schedules are always legal.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from channel_scheduler.core.exceptions import ConflictError, ValidationError

if TYPE_CHECKING:
    from channel_scheduler.models.schedule import Schedule
    from channel_scheduler.services.schedule.store import ScheduleStore


def intervals_overlap(start_a: Any, end_a: Any, start_b: Any, end_b: Any) -> Any:
    """Half-open overlap predicate.

    Uses ``&`` rather than ``and`` so the same predicate evaluates plain
    datetimes to a ``bool`` and SQLAlchemy column expressions to a SQL
    ``AND`` clause.

    Examples:
        >>> intervals_overlap(t(6), t(7), t(7), t(8))
        False
        >>> intervals_overlap(t(6), t(8), t(7), t(9))
        True
    """
    return (start_a < end_b) & (start_b < end_a)


def validate_interval(start: datetime, end: datetime) -> None:
    """Raise ValidationError unless ``start < end``."""
    if start >= end:
        raise ValidationError(
            "End time must be after start time",
            field="end_time",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )


class OverlapChecker:
    """Decides whether an interval conflicts with a channel's schedules.

    Every call queries the live store; nothing is cached between calls.
    Callers that write afterwards must hold the channel lock (see
    ``ScheduleStore.channel_transaction``) so the answer stays valid until
    commit.
    """

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    async def conflicts(
        self,
        channel_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_id: uuid.UUID | None = None,
    ) -> Schedule | None:
        """Return the earliest schedule on the channel overlapping ``[start, end)``.

        Args:
            channel_id: Channel to check
            start: Inclusive start
            end: Exclusive end
            exclude_id: Schedule to ignore, used when re-checking an update

        Returns:
            Schedule: The first conflicting schedule, or None

        Raises:
            ValidationError: If ``start >= end``
        """
        validate_interval(start, end)
        return await self.store.find_conflicting(
            channel_id, start, end, exclude_id=exclude_id
        )

    async def ensure_no_conflict(
        self,
        channel_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        """Raise ConflictError if ``[start, end)`` is taken on the channel."""
        existing = await self.conflicts(channel_id, start, end, exclude_id=exclude_id)
        if existing is not None:
            raise ConflictError(
                channel_id=channel_id,
                start=start,
                end=end,
                conflicting_id=existing.id,
                conflicting_start=existing.start_time,
                conflicting_end=existing.end_time,
            )


__all__ = [
    "OverlapChecker",
    "intervals_overlap",
    "validate_interval",
]
