"""Program model.

Programs are tenant-owned catalog entries referenced by schedules.
Template application resolves programs lazily by title.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from channel_scheduler.models.base import GUID, Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from channel_scheduler.models.schedule import Schedule


class Program(UUIDMixin, TimestampMixin, Base):
    """Tenant-owned program catalog entry.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        tenant_id: UUID of the owning tenant
        title: Program title; not unique, the oldest match wins on lookup
        description: Optional free-text description
        category: Category label, e.g. "News"
        duration: Nominal duration in minutes
        schedules: Schedules airing this program
    """

    __tablename__ = "programs"

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="Other",
        server_default="Other",
    )

    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    schedules: Mapped[list[Schedule]] = relationship(
        "Schedule",
        back_populates="program",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """Return string representation of the program."""
        return f"<Program(id={self.id}, title='{self.title}', duration={self.duration})>"


__all__ = ["Program"]
