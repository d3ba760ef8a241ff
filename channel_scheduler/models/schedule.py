"""Schedule model.

A schedule places one program on one channel for the half-open interval
``[start_time, end_time)``. For a fixed channel, schedule intervals never
overlap. The service layer checks this under a channel row lock; on
PostgreSQL an exclusion constraint enforces it as well.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import (
    DDL,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    event,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channel_scheduler.models.base import (
    GUID,
    Base,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)

if TYPE_CHECKING:
    from channel_scheduler.models.channel import Channel
    from channel_scheduler.models.program import Program

# Name of the PostgreSQL exclusion constraint; violations map to ConflictError
NO_OVERLAP_CONSTRAINT = "ex_schedules_channel_no_overlap"


class Schedule(UUIDMixin, TimestampMixin, Base):
    """One airing of a program on a channel.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        channel_id: UUID of the channel (tenant scope comes from the channel)
        program_id: UUID of the program aired
        start_time: Inclusive start instant (UTC)
        end_time: Exclusive end instant (UTC)
        is_live: Broadcast live
        is_new: First airing of an episode; copies are never new
        is_repeat: Re-run of an earlier airing
        created_at: Timestamp of creation (from TimestampMixin)
        updated_at: Timestamp of last update (from TimestampMixin)

    Examples:
        >>> schedule = Schedule(
        ...     channel_id=channel.id,
        ...     program_id=program.id,
        ...     start_time=datetime(2024, 1, 1, 6, tzinfo=UTC),
        ...     end_time=datetime(2024, 1, 1, 7, tzinfo=UTC),
        ...     is_live=True,
        ... )
    """

    __tablename__ = "schedules"

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_schedules_interval"),
        Index("ix_schedules_channel_id_start_time", "channel_id", "start_time"),
    )

    channel_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("channels.id", ondelete="RESTRICT"),
        nullable=False,
    )

    program_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("programs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    start_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    end_time: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    # Flags
    is_live: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    is_new: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    is_repeat: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # Relationships
    channel: Mapped[Channel] = relationship(
        "Channel",
        back_populates="schedules",
    )

    program: Mapped[Program] = relationship(
        "Program",
        back_populates="schedules",
    )

    def __repr__(self) -> str:
        """Return string representation of the schedule."""
        return (
            f"<Schedule(id={self.id}, channel_id={self.channel_id}, "
            f"start={self.start_time}, end={self.end_time})>"
        )

    @property
    def duration(self) -> timedelta:
        """Length of the airing as a ``timedelta``."""
        return self.end_time - self.start_time


# PostgreSQL only: enforce the per-channel non-overlap invariant in storage.
event.listen(
    Schedule.__table__,
    "after_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(
        dialect="postgresql"
    ),
)
event.listen(
    Schedule.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE schedules ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist "
        "(channel_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&)"
    ).execute_if(dialect="postgresql"),
)


__all__ = ["NO_OVERLAP_CONSTRAINT", "Schedule"]
