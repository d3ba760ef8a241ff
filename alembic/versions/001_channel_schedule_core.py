"""Channel schedule core tables.

Revision ID: 001_channel_schedule_core
Revises:
Create Date: 2026-10-19 00:00:00

Creates channels, programs and schedules. On PostgreSQL the schedules
table also gets a GiST exclusion constraint that rejects overlapping
``[start_time, end_time)`` ranges on the same channel.
"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_channel_schedule_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade database schema - Add channels, programs and schedules."""
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # Create channels table
    op.create_table(
        "channels",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_channels"),
    )
    op.create_index("ix_channels_tenant_id", "channels", ["tenant_id"])

    # Create programs table
    op.create_table(
        "programs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "category", sa.String(length=100), nullable=False, server_default="Other"
        ),
        sa.Column("duration", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_programs"),
    )
    op.create_index("ix_programs_tenant_id", "programs", ["tenant_id"])
    op.create_index("ix_programs_title", "programs", ["title"])

    # Create schedules table
    op.create_table(
        "schedules",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("channel_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("program_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_new", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_repeat", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["channel_id"],
            ["channels.id"],
            name="fk_schedules_channel_id",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["program_id"],
            ["programs.id"],
            name="fk_schedules_program_id",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint("start_time < end_time", name="ck_schedules_interval"),
        sa.PrimaryKeyConstraint("id", name="pk_schedules"),
    )
    op.create_index(
        "ix_schedules_channel_id_start_time", "schedules", ["channel_id", "start_time"]
    )
    op.create_index("ix_schedules_program_id", "schedules", ["program_id"])

    # Per-channel non-overlap, half-open ranges
    op.execute(
        "ALTER TABLE schedules ADD CONSTRAINT ex_schedules_channel_no_overlap "
        "EXCLUDE USING gist "
        "(channel_id WITH =, tstzrange(start_time, end_time, '[)') WITH &&)"
    )


def downgrade() -> None:
    """Downgrade database schema - Remove channels, programs and schedules."""
    op.execute(
        "ALTER TABLE schedules DROP CONSTRAINT IF EXISTS ex_schedules_channel_no_overlap"
    )
    op.drop_index("ix_schedules_program_id", table_name="schedules")
    op.drop_index("ix_schedules_channel_id_start_time", table_name="schedules")
    op.drop_table("schedules")

    op.drop_index("ix_programs_title", table_name="programs")
    op.drop_index("ix_programs_tenant_id", table_name="programs")
    op.drop_table("programs")

    op.drop_index("ix_channels_tenant_id", table_name="channels")
    op.drop_table("channels")
