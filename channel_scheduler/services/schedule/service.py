"""Schedule Service for single-schedule operations.

This service handles business logic for schedule management: creating,
updating, deleting and listing schedules on tenant-owned channels. Every
write is checked against the channel's existing schedules under the
channel lock and fails with ``ConflictError`` on overlap.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from channel_scheduler.core.exceptions import NotFoundError
from channel_scheduler.schemas.schedule import (
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
)
from channel_scheduler.services.schedule.overlap import (
    OverlapChecker,
    validate_interval,
)

if TYPE_CHECKING:
    from channel_scheduler.models.schedule import Schedule
    from channel_scheduler.services.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service for managing channel schedules.

    Attributes:
        store: Persistence gateway
        checker: Overlap checker over the same store
    """

    def __init__(self, store: ScheduleStore) -> None:
        """Initialize the ScheduleService.

        Args:
            store: ScheduleStore bound to the caller's session
        """
        self.store = store
        self.checker = OverlapChecker(store)

    # ==========================================================================
    # CRUD Operations
    # ==========================================================================

    async def create_schedule(
        self,
        schedule_data: ScheduleCreate,
        tenant_id: uuid.UUID,
    ) -> ScheduleResponse:
        """Create a new schedule.

        Args:
            schedule_data: Schedule creation data
            tenant_id: Tenant that must own the channel and the program

        Returns:
            ScheduleResponse: Created schedule

        Raises:
            NotFoundError: If the channel or program is not the tenant's
            ValidationError: If ``start_time >= end_time``
            ConflictError: If the interval overlaps a schedule on the channel
        """
        await self._require_channel(schedule_data.channel_id, tenant_id)
        await self._require_program(schedule_data.program_id, tenant_id)
        validate_interval(schedule_data.start_time, schedule_data.end_time)

        async with self.store.channel_transaction(schedule_data.channel_id):
            await self.checker.ensure_no_conflict(
                schedule_data.channel_id,
                schedule_data.start_time,
                schedule_data.end_time,
            )
            schedule = await self.store.create(**schedule_data.model_dump())
            response = ScheduleResponse.model_validate(schedule)

        logger.info(
            "Created schedule %s on channel %s", response.id, response.channel_id
        )
        return response

    async def get_schedule(
        self,
        schedule_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> ScheduleResponse:
        """Get a schedule by ID.

        Raises:
            NotFoundError: If the schedule is not on one of the tenant's channels
        """
        schedule = await self._get_schedule_by_id(schedule_id, tenant_id)
        return ScheduleResponse.model_validate(schedule)

    async def list_schedules(
        self,
        tenant_id: uuid.UUID,
        channel_id: uuid.UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ScheduleResponse]:
        """List schedules.

        With ``channel_id``, returns that channel's schedules intersecting
        ``[start, end)`` in ascending start order. Without it, returns every
        schedule of the tenant, newest start first.

        Raises:
            NotFoundError: If ``channel_id`` is not one of the tenant's channels
        """
        if channel_id is None:
            schedules = await self.store.list_for_tenant(tenant_id)
        else:
            await self._require_channel(channel_id, tenant_id)
            schedules = await self.store.list_by_channel_and_window(
                channel_id, start=start, end=end
            )
        return [ScheduleResponse.model_validate(s) for s in schedules]

    async def update_schedule(
        self,
        schedule_id: uuid.UUID,
        schedule_data: ScheduleUpdate,
        tenant_id: uuid.UUID,
    ) -> ScheduleResponse:
        """Update a schedule.

        The merged interval is validated and checked for overlap on the
        (possibly new) channel, ignoring the schedule itself. Both the old
        and the new channel are locked for the write. On failure the stored
        schedule is unchanged.

        Args:
            schedule_id: UUID of the schedule
            schedule_data: Fields to change; omitted fields keep their value
            tenant_id: Tenant that must own the schedule and any new
                channel or program

        Returns:
            ScheduleResponse: Updated schedule

        Raises:
            NotFoundError: If the schedule, new channel or new program is
                not the tenant's
            ValidationError: If the merged interval is empty or inverted
            ConflictError: If the merged interval overlaps another schedule
        """
        schedule = await self._get_schedule_by_id(schedule_id, tenant_id)

        if schedule_data.channel_id is not None:
            await self._require_channel(schedule_data.channel_id, tenant_id)
        if schedule_data.program_id is not None:
            await self._require_program(schedule_data.program_id, tenant_id)

        old_channel_id = schedule.channel_id
        channel_id = schedule_data.channel_id or old_channel_id
        start = schedule_data.start_time or schedule.start_time
        end = schedule_data.end_time or schedule.end_time
        validate_interval(start, end)

        changes = schedule_data.model_dump(exclude_none=True)

        async with self.store.channel_transaction(old_channel_id, channel_id):
            if schedule_data.changes_placement:
                await self.checker.ensure_no_conflict(
                    channel_id, start, end, exclude_id=schedule_id
                )
            schedule = await self.store.update(schedule, **changes)
            response = ScheduleResponse.model_validate(schedule)

        logger.info("Updated schedule %s: %s", schedule_id, sorted(changes))
        return response

    async def delete_schedule(
        self,
        schedule_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        """Delete a schedule.

        Raises:
            NotFoundError: If the schedule is not on one of the tenant's channels
        """
        schedule = await self._get_schedule_by_id(schedule_id, tenant_id)

        async with self.store.channel_transaction(schedule.channel_id):
            await self.store.delete(schedule)

        logger.info("Deleted schedule %s", schedule_id)

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    async def _get_schedule_by_id(
        self,
        schedule_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> Schedule:
        schedule = await self.store.find_by_id(schedule_id, tenant_id=tenant_id)
        if schedule is None:
            raise NotFoundError("schedule", schedule_id)
        return schedule

    async def _require_channel(
        self,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        if await self.store.get_channel(channel_id, tenant_id=tenant_id) is None:
            raise NotFoundError("channel", channel_id)

    async def _require_program(
        self,
        program_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        if await self.store.get_program(program_id, tenant_id=tenant_id) is None:
            raise NotFoundError("program", program_id)


__all__ = ["ScheduleService"]
