"""Schedule copying.

A copy airs the same program again. By default it lands
``COPY_DEFAULT_OFFSET_HOURS`` after the source on the same channel and
keeps the source's duration. Copies are never marked new; ``is_live`` is
carried over.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from channel_scheduler.core.config import Settings, get_settings
from channel_scheduler.core.exceptions import NotFoundError
from channel_scheduler.models.base import to_utc
from channel_scheduler.schemas.schedule import ScheduleCopyRequest, ScheduleResponse
from channel_scheduler.services.schedule.overlap import OverlapChecker

if TYPE_CHECKING:
    from channel_scheduler.services.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


class ScheduleCopier:
    """Duplicates a schedule to a new time and, optionally, a new channel."""

    def __init__(self, store: ScheduleStore, settings: Settings | None = None) -> None:
        self.store = store
        self.checker = OverlapChecker(store)
        self.settings = settings or get_settings()

    async def copy(
        self,
        schedule_id: uuid.UUID,
        tenant_id: uuid.UUID,
        new_start: datetime | None = None,
        new_end: datetime | None = None,
        target_channel_id: uuid.UUID | None = None,
    ) -> ScheduleResponse:
        """Copy a schedule.

        Args:
            schedule_id: Source schedule
            tenant_id: Tenant that must own the source and target channels
            new_start: Start of the copy; defaults to source start plus the
                configured offset
            new_end: End of the copy; defaults to ``new_start`` plus the
                source duration
            target_channel_id: Channel of the copy; defaults to the source's

        Returns:
            ScheduleResponse: The persisted copy

        Raises:
            NotFoundError: If the source or target channel is not the tenant's
            ValidationError: If the resulting interval is empty or inverted
            ConflictError: If the interval is taken on the target channel;
                nothing is written
        """
        source = await self.store.find_by_id(schedule_id, tenant_id=tenant_id)
        if source is None:
            raise NotFoundError("schedule", schedule_id)

        channel_id = target_channel_id or source.channel_id
        if await self.store.get_channel(channel_id, tenant_id=tenant_id) is None:
            raise NotFoundError("channel", channel_id)

        start = (
            to_utc(new_start)
            if new_start is not None
            else source.start_time + timedelta(hours=self.settings.COPY_DEFAULT_OFFSET_HOURS)
        )
        end = to_utc(new_end) if new_end is not None else start + source.duration

        program_id = source.program_id
        is_live = source.is_live

        async with self.store.channel_transaction(channel_id):
            await self.checker.ensure_no_conflict(channel_id, start, end)
            schedule = await self.store.create(
                channel_id=channel_id,
                program_id=program_id,
                start_time=start,
                end_time=end,
                is_live=is_live,
                is_new=False,
            )
            response = ScheduleResponse.model_validate(schedule)

        logger.info(
            "Copied schedule %s to %s on channel %s", schedule_id, response.id, channel_id
        )
        return response

    async def copy_from_request(
        self,
        schedule_id: uuid.UUID,
        request: ScheduleCopyRequest,
        tenant_id: uuid.UUID,
    ) -> ScheduleResponse:
        """Copy a schedule using the fields of a ``ScheduleCopyRequest``."""
        return await self.copy(
            schedule_id,
            tenant_id,
            new_start=request.new_start_time,
            new_end=request.new_end_time,
            target_channel_id=request.channel_id,
        )


__all__ = ["ScheduleCopier"]
