"""pytest configuration and fixtures for the scheduling core.

This module provides async database fixtures backed by an in-memory
SQLite database, the scheduling services bound to a test session, and
sample tenant/channel/program data.

Services commit and roll back their own transactions, so every test gets
a fresh database instead of an outer rollback-only transaction.
"""

from collections.abc import AsyncGenerator
from datetime import datetime
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from channel_scheduler.core.config import Settings
from channel_scheduler.db.session import build_session_factory
from channel_scheduler.models import Base, Channel, Program, Schedule
from channel_scheduler.schemas.schedule import ScheduleResponse
from channel_scheduler.services.schedule import (
    ScheduleCopier,
    ScheduleService,
    ScheduleStore,
    TemplateApplier,
)

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that exercise the database",
    )


# =============================================================================
# HELPERS
# =============================================================================


async def _count_schedules(session: AsyncSession, channel_id: UUID | None = None) -> int:
    """Count stored schedules, optionally for one channel."""
    query = select(func.count()).select_from(Schedule)
    if channel_id is not None:
        query = query.where(Schedule.channel_id == channel_id)
    result = await session.execute(query)
    return result.scalar_one()


async def _count_programs(session: AsyncSession, tenant_id: UUID) -> int:
    """Count a tenant's programs."""
    result = await session.execute(
        select(func.count()).select_from(Program).where(Program.tenant_id == tenant_id)
    )
    return result.scalar_one()


# =============================================================================
# ASYNC ENGINE FIXTURES (SQLite In-Memory for Tests)
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an async SQLite in-memory engine for testing.

    StaticPool keeps the single in-memory connection alive for the whole
    test. All tables are created on setup and dropped on teardown.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_session_maker(
    async_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return build_session_factory(async_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(
    async_session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for one test."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def scheduling_settings() -> Settings:
    """Settings with UTC slots and default offsets."""
    return Settings(
        SCHEDULE_TIMEZONE="UTC",
        COPY_DEFAULT_OFFSET_HOURS=24,
        TEMPLATE_MAX_RANGE_DAYS=366,
    )


@pytest.fixture
def store(db_session: AsyncSession) -> ScheduleStore:
    return ScheduleStore(db_session)


@pytest.fixture
def schedule_service(store: ScheduleStore) -> ScheduleService:
    return ScheduleService(store)


@pytest.fixture
def template_applier(store: ScheduleStore, scheduling_settings: Settings) -> TemplateApplier:
    return TemplateApplier(store, settings=scheduling_settings)


@pytest.fixture
def schedule_copier(store: ScheduleStore, scheduling_settings: Settings) -> ScheduleCopier:
    return ScheduleCopier(store, settings=scheduling_settings)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
def other_tenant_id() -> UUID:
    return uuid4()


async def _make_channel(
    session: AsyncSession, tenant_id: UUID, name: str = "news-channel"
) -> UUID:
    channel = Channel(
        tenant_id=tenant_id,
        name=name,
        display_name=name.replace("-", " ").title(),
    )
    session.add(channel)
    await session.commit()
    return channel.id


async def _make_program(
    session: AsyncSession,
    tenant_id: UUID,
    title: str = "Morning Headlines",
    duration: int = 60,
    created_at: datetime | None = None,
) -> UUID:
    program = Program(
        tenant_id=tenant_id,
        title=title,
        category="News",
        duration=duration,
    )
    if created_at is not None:
        program.created_at = created_at
    session.add(program)
    await session.commit()
    return program.id


# Sample data fixtures hand out plain ids: a service rollback expires every
# ORM object in the session, and expired attributes cannot lazy-load here.


@pytest_asyncio.fixture
async def channel_id(db_session: AsyncSession, tenant_id: UUID) -> UUID:
    """A channel owned by ``tenant_id``."""
    return await _make_channel(db_session, tenant_id)


@pytest_asyncio.fixture
async def second_channel_id(db_session: AsyncSession, tenant_id: UUID) -> UUID:
    """Another channel owned by ``tenant_id``."""
    return await _make_channel(db_session, tenant_id, name="sports-channel")


@pytest_asyncio.fixture
async def foreign_channel_id(db_session: AsyncSession, other_tenant_id: UUID) -> UUID:
    """A channel owned by a different tenant."""
    return await _make_channel(db_session, other_tenant_id, name="foreign-channel")


@pytest_asyncio.fixture
async def program_id(db_session: AsyncSession, tenant_id: UUID) -> UUID:
    """A program owned by ``tenant_id``."""
    return await _make_program(db_session, tenant_id)


@pytest_asyncio.fixture
async def foreign_program_id(db_session: AsyncSession, other_tenant_id: UUID) -> UUID:
    """A program owned by a different tenant."""
    return await _make_program(db_session, other_tenant_id, title="Foreign Show")


@pytest.fixture
def make_schedule(store: ScheduleStore):
    """Insert and commit a schedule through the store, bypassing checks.

    Usage: ``await make_schedule(channel_id, program_id, start, end, is_live=True)``
    """

    async def _make(
        channel_id: UUID,
        program_id: UUID,
        start: datetime,
        end: datetime,
        **flags: bool,
    ) -> ScheduleResponse:
        schedule = await store.create(
            channel_id=channel_id,
            program_id=program_id,
            start_time=start,
            end_time=end,
            **flags,
        )
        await store.commit()
        return ScheduleResponse.model_validate(schedule)

    return _make


@pytest.fixture
def channel_factory(db_session: AsyncSession):
    """Create extra channels: ``await channel_factory(tenant_id, name)``."""

    async def _make(tenant_id: UUID, name: str = "extra-channel") -> UUID:
        return await _make_channel(db_session, tenant_id, name=name)

    return _make


@pytest.fixture
def program_factory(db_session: AsyncSession):
    """Create extra programs: ``await program_factory(tenant_id, title)``."""

    async def _make(
        tenant_id: UUID,
        title: str = "Morning Headlines",
        duration: int = 60,
        created_at: datetime | None = None,
    ) -> UUID:
        return await _make_program(
            db_session, tenant_id, title=title, duration=duration, created_at=created_at
        )

    return _make


@pytest.fixture
def count_schedules(db_session: AsyncSession):
    """Count stored schedules: ``await count_schedules(channel_id=None)``."""

    async def _count(channel_id: UUID | None = None) -> int:
        return await _count_schedules(db_session, channel_id)

    return _count


@pytest.fixture
def count_programs(db_session: AsyncSession):
    """Count a tenant's programs: ``await count_programs(tenant_id)``."""

    async def _count(tenant_id: UUID) -> int:
        return await _count_programs(db_session, tenant_id)

    return _count
