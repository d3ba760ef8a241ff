"""Persistence gateway for channels, programs and schedules.

All reads and writes of the scheduling core go through ``ScheduleStore``.
Writes that must respect the per-channel non-overlap invariant run inside
``channel_transaction``, which locks the affected channel rows so that the
overlap check and the write commit as one unit.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from channel_scheduler.core.exceptions import ConflictError
from channel_scheduler.models.channel import Channel
from channel_scheduler.models.program import Program
from channel_scheduler.models.schedule import NO_OVERLAP_CONSTRAINT, Schedule
from channel_scheduler.services.schedule.overlap import intervals_overlap

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Async SQLAlchemy store for the scheduling core.

    Attributes:
        db: Session every query runs on
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ==========================================================================
    # Transactions
    # ==========================================================================

    async def lock_channels(self, *channel_ids: uuid.UUID) -> None:
        """Take row locks on the given channels in id order.

        Locking in a fixed order keeps two writers that touch the same pair
        of channels from deadlocking. Dialects without row locks (SQLite)
        ignore ``FOR UPDATE``.
        """
        ids = sorted(set(channel_ids), key=str)
        if not ids:
            return
        await self.db.execute(
            select(Channel.id)
            .where(Channel.id.in_(ids))
            .order_by(Channel.id)
            .with_for_update()
        )

    @asynccontextmanager
    async def channel_transaction(self, *channel_ids: uuid.UUID) -> AsyncIterator[None]:
        """Run a check-then-write unit under the channels' locks.

        Commits when the block exits normally. On any exception the
        transaction is rolled back and the exception propagates.

        Example:
            >>> async with store.channel_transaction(channel_id):
            ...     await checker.ensure_no_conflict(channel_id, start, end)
            ...     await store.create(...)
        """
        try:
            await self.lock_channels(*channel_ids)
            yield
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    # ==========================================================================
    # Channels & Programs
    # ==========================================================================

    async def get_channel(
        self,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID | None = None,
    ) -> Channel | None:
        """Get a channel, optionally scoped to a tenant."""
        query = select(Channel).where(Channel.id == channel_id)
        if tenant_id is not None:
            query = query.where(Channel.tenant_id == tenant_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_program(
        self,
        program_id: uuid.UUID,
        tenant_id: uuid.UUID | None = None,
    ) -> Program | None:
        """Get a program, optionally scoped to a tenant."""
        query = select(Program).where(Program.id == program_id)
        if tenant_id is not None:
            query = query.where(Program.tenant_id == tenant_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_program_by_title(
        self,
        tenant_id: uuid.UUID,
        title: str,
    ) -> Program | None:
        """Find the tenant's oldest program with an exact title match."""
        result = await self.db.execute(
            select(Program)
            .where(Program.tenant_id == tenant_id, Program.title == title)
            .order_by(Program.created_at, Program.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_program(
        self,
        tenant_id: uuid.UUID,
        title: str,
        duration: int,
        description: str | None = None,
        category: str = "Other",
    ) -> Program:
        """Insert a program and flush it so its id is usable."""
        program = Program(
            tenant_id=tenant_id,
            title=title,
            description=description,
            category=category,
            duration=duration,
        )
        self.db.add(program)
        await self.db.flush()
        return program

    # ==========================================================================
    # Schedules - Reads
    # ==========================================================================

    async def find_by_id(
        self,
        schedule_id: uuid.UUID,
        tenant_id: uuid.UUID | None = None,
    ) -> Schedule | None:
        """Get a schedule, optionally scoped to its channel's tenant."""
        query = select(Schedule).where(Schedule.id == schedule_id)
        if tenant_id is not None:
            query = query.join(Channel, Schedule.channel_id == Channel.id).where(
                Channel.tenant_id == tenant_id
            )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_conflicting(
        self,
        channel_id: uuid.UUID,
        start: datetime,
        end: datetime,
        exclude_id: uuid.UUID | None = None,
    ) -> Schedule | None:
        """Return the earliest schedule on the channel overlapping ``[start, end)``."""
        query = select(Schedule).where(
            Schedule.channel_id == channel_id,
            intervals_overlap(Schedule.start_time, Schedule.end_time, start, end),
        )
        if exclude_id is not None:
            query = query.where(Schedule.id != exclude_id)
        result = await self.db.execute(
            query.order_by(Schedule.start_time, Schedule.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_by_channel_and_window(
        self,
        channel_id: uuid.UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Schedule]:
        """List a channel's schedules intersecting ``[start, end)``, ascending.

        A missing bound leaves that side of the window open.
        """
        query = select(Schedule).where(Schedule.channel_id == channel_id)
        if end is not None:
            query = query.where(Schedule.start_time < end)
        if start is not None:
            query = query.where(Schedule.end_time > start)
        result = await self.db.execute(query.order_by(Schedule.start_time, Schedule.id))
        return list(result.scalars().all())

    async def list_for_tenant(self, tenant_id: uuid.UUID) -> list[Schedule]:
        """List every schedule on the tenant's channels, newest start first."""
        result = await self.db.execute(
            select(Schedule)
            .join(Channel, Schedule.channel_id == Channel.id)
            .where(Channel.tenant_id == tenant_id)
            .order_by(Schedule.start_time.desc(), Schedule.id)
        )
        return list(result.scalars().all())

    # ==========================================================================
    # Schedules - Writes
    # ==========================================================================

    async def create(
        self,
        channel_id: uuid.UUID,
        program_id: uuid.UUID,
        start_time: datetime,
        end_time: datetime,
        is_live: bool = False,
        is_new: bool = False,
        is_repeat: bool = False,
    ) -> Schedule:
        """Insert a schedule and flush it.

        Raises:
            ConflictError: If the database exclusion constraint rejects it
        """
        schedule = Schedule(
            channel_id=channel_id,
            program_id=program_id,
            start_time=start_time,
            end_time=end_time,
            is_live=is_live,
            is_new=is_new,
            is_repeat=is_repeat,
        )
        self.db.add(schedule)
        await self._flush_checked(channel_id, start_time, end_time)
        return schedule

    async def update(self, schedule: Schedule, **changes: Any) -> Schedule:
        """Apply attribute changes to a schedule and flush them.

        Raises:
            ConflictError: If the database exclusion constraint rejects it
        """
        for field, value in changes.items():
            setattr(schedule, field, value)
        await self._flush_checked(
            schedule.channel_id, schedule.start_time, schedule.end_time
        )
        return schedule

    async def delete(self, schedule: Schedule) -> None:
        await self.db.delete(schedule)
        await self.db.flush()

    async def _flush_checked(
        self,
        channel_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            if NO_OVERLAP_CONSTRAINT in str(e.orig):
                logger.warning(
                    "Exclusion constraint rejected schedule on channel %s", channel_id
                )
                raise ConflictError(channel_id=channel_id, start=start, end=end) from e
            raise


__all__ = ["ScheduleStore"]
