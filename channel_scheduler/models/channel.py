"""Channel model.

A channel is the tenant-owned container that schedules are placed on.
The overlap invariant is scoped per channel, and write transactions lock
the channel row to serialize writers on the same channel.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channel_scheduler.models.base import GUID, Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from channel_scheduler.models.schedule import Schedule


class Channel(UUIDMixin, TimestampMixin, Base):
    """Tenant-owned broadcast channel.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        tenant_id: UUID of the owning tenant
        name: Machine name, e.g. "news-channel"
        display_name: Human readable name, e.g. "News Channel"
        is_active: Whether the channel is on air
        schedules: Schedules placed on this channel

    Deleting a channel that still has schedules is rejected by the
    ``RESTRICT`` foreign key on ``schedules.channel_id``.
    """

    __tablename__ = "channels"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    display_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    schedules: Mapped[list[Schedule]] = relationship(
        "Schedule",
        back_populates="channel",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """Return string representation of the channel."""
        return f"<Channel(id={self.id}, name='{self.name}', tenant_id={self.tenant_id})>"


__all__ = ["Channel"]
