"""Tests for bulk template application."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, time

import pytest
from sqlalchemy import select

from channel_scheduler.core.config import Settings
from channel_scheduler.core.exceptions import NotFoundError, ValidationError
from channel_scheduler.models.program import Program
from channel_scheduler.models.schedule import Schedule
from channel_scheduler.schemas.schedule import TemplateApplyRequest
from channel_scheduler.schemas.template import ScheduleTemplate
from channel_scheduler.services.schedule.applier import TemplateApplier
from channel_scheduler.services.schedule.catalog import get_template
from channel_scheduler.services.schedule.store import ScheduleStore


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def custom_template(**overrides) -> ScheduleTemplate:
    data = {
        "id": "custom",
        "name": "Custom",
        "category": "news",
        "pattern": "daily",
        "time_slots": [
            {
                "id": "1",
                "start_time": "10:00",
                "end_time": "11:00",
                "program_title": "Untitled Hour",
            }
        ],
    }
    data.update(overrides)
    return ScheduleTemplate.model_validate(data)


class TestApplyTemplate:
    """End-to-end application against the store."""

    async def test_creates_every_candidate_on_empty_channel(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        count_schedules,
        count_programs,
    ) -> None:
        result = await template_applier.apply(
            get_template("news-morning"),
            channel_id=channel_id,
            tenant_id=tenant_id,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 7),
        )

        assert result.success is True
        assert result.stats.total == 21
        assert result.stats.created == 21
        assert result.stats.failed == 0
        assert result.message == "Template applied successfully. Created 21 schedules"
        assert len(result.created_schedules) == 21
        assert result.skipped == []
        assert await count_schedules(channel_id) == 21
        assert await count_programs(tenant_id) == 3

    async def test_candidates_follow_date_then_slot_order(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        result = await template_applier.apply(
            get_template("news-morning"),
            channel_id=channel_id,
            tenant_id=tenant_id,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 2),
        )

        starts = [s.start_time for s in result.created_schedules]
        assert starts == [
            utc(2024, 1, 1, 6),
            utc(2024, 1, 1, 7),
            utc(2024, 1, 1, 8),
            utc(2024, 1, 2, 6),
            utc(2024, 1, 2, 7),
            utc(2024, 1, 2, 8),
        ]
        assert all(s.is_live for s in result.created_schedules)
        assert not any(s.is_new for s in result.created_schedules)

    async def test_reapplying_skips_everything(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        count_schedules,
        count_programs,
    ) -> None:
        template = get_template("news-evening")
        first = await template_applier.apply(
            template, channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 3)
        )

        second = await template_applier.apply(
            template, channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 3)
        )

        assert first.stats.created == 9
        assert second.stats.total == 9
        assert second.stats.created == 0
        assert second.stats.failed == 9
        assert second.success is True
        assert second.message == (
            "Template applied successfully. Created 0 schedules "
            "(9 failed due to conflicts)"
        )
        first_ids = {s.id for s in first.created_schedules}
        assert {s.conflicting_schedule_id for s in second.skipped} == first_ids
        assert await count_schedules(channel_id) == 9
        assert await count_programs(tenant_id) == 3

    async def test_partial_conflicts_are_skipped_and_counted(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        program_id: uuid.UUID,
        make_schedule,
        count_schedules,
    ) -> None:
        blocker = await make_schedule(
            channel_id, program_id, utc(2024, 1, 2, 7, 30), utc(2024, 1, 2, 8, 30)
        )

        result = await template_applier.apply(
            get_template("news-morning"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 3),
        )

        assert result.stats.total == 9
        assert result.stats.created == 7
        assert result.stats.failed == 2
        assert result.stats.created + result.stats.failed == result.stats.total
        assert [s.program_title for s in result.skipped] == [
            "Breakfast News",
            "Morning Update",
        ]
        assert all(s.conflicting_schedule_id == blocker.id for s in result.skipped)
        assert result.message.endswith("(2 failed due to conflicts)")
        assert await count_schedules(channel_id) == 8

    async def test_empty_recurrence_creates_nothing(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        """religious-sunday over Monday to Saturday matches no dates."""
        result = await template_applier.apply(
            get_template("religious-sunday"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 6),
        )

        assert result.stats.total == 0
        assert result.created_schedules == []
        assert result.message == "Template applied successfully. Created 0 schedules"

    @pytest.mark.parametrize(
        "recurrence_fields",
        [
            {"pattern": "weekly", "days_of_week": []},
            {"pattern": "weekly"},
            {"pattern": "monthly"},
        ],
    )
    async def test_recurrence_without_days_creates_nothing(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        count_schedules,
        recurrence_fields,
    ) -> None:
        result = await template_applier.apply(
            custom_template(**recurrence_fields),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 31),
        )

        assert result.success is True
        assert result.stats.total == 0
        assert result.stats.created == 0
        assert await count_schedules(channel_id) == 0

    async def test_monthly_template_total(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        template = custom_template(pattern="monthly", day_of_month=31)

        result = await template_applier.apply(
            template, channel_id, tenant_id, date(2024, 1, 1), date(2024, 4, 30)
        )

        assert result.stats.total == 2
        assert [s.start_time for s in result.created_schedules] == [
            utc(2024, 1, 31, 10),
            utc(2024, 3, 31, 10),
        ]


class TestMidnightAndZones:
    async def test_overnight_slot_ends_next_day(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        result = await template_applier.apply(
            get_template("music-night"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 2),
        )

        assert result.stats.created == 6
        jazz = [s for s in result.created_schedules if s.start_time.hour == 23]
        assert [(s.start_time, s.end_time) for s in jazz] == [
            (utc(2024, 1, 1, 23), utc(2024, 1, 2, 0)),
            (utc(2024, 1, 2, 23), utc(2024, 1, 3, 0)),
        ]

    async def test_slots_anchor_in_requested_zone(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        result = await template_applier.apply(
            get_template("news-morning"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 1),
            timezone="America/New_York",
        )

        # EST is UTC-5 in January
        assert result.created_schedules[0].start_time == utc(2024, 1, 1, 11)

    async def test_configured_zone_is_default(
        self,
        store: ScheduleStore,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        applier = TemplateApplier(
            store, settings=Settings(SCHEDULE_TIMEZONE="Europe/Berlin")
        )

        result = await applier.apply(
            get_template("news-morning"),
            channel_id,
            tenant_id,
            date(2024, 7, 1),
            date(2024, 7, 1),
        )

        # CEST is UTC+2 in July
        assert result.created_schedules[0].start_time == utc(2024, 7, 1, 4)

    async def test_unknown_zone_rejected(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        with pytest.raises(ValidationError, match="Unknown timezone"):
            await template_applier.apply(
                get_template("news-morning"),
                channel_id,
                tenant_id,
                date(2024, 1, 1),
                date(2024, 1, 1),
                timezone="Mars/Olympus_Mons",
            )


class TestProgramResolution:
    async def test_reuses_oldest_program_with_title(
        self,
        template_applier: TemplateApplier,
        db_session,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        program_factory,
        count_programs,
    ) -> None:
        oldest = await program_factory(
            tenant_id, "Morning Headlines", created_at=utc(2023, 1, 1)
        )
        await program_factory(tenant_id, "Morning Headlines", created_at=utc(2023, 6, 1))

        result = await template_applier.apply(
            get_template("news-morning"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 1),
        )

        headlines = [s for s in result.created_schedules if s.start_time.hour == 6]
        assert headlines[0].program_id == oldest
        # Two pre-existing + Breakfast News + Morning Update
        assert await count_programs(tenant_id) == 4

    async def test_other_tenants_programs_are_not_reused(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        other_tenant_id: uuid.UUID,
        program_factory,
        count_programs,
    ) -> None:
        await program_factory(other_tenant_id, "Morning Headlines")

        await template_applier.apply(
            get_template("news-morning"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 1),
        )

        assert await count_programs(tenant_id) == 3
        assert await count_programs(other_tenant_id) == 1

    async def test_new_program_defaults(
        self,
        template_applier: TemplateApplier,
        db_session,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        template = custom_template(
            time_slots=[
                {
                    "id": "1",
                    "start_time": "23:00",
                    "end_time": "00:30",
                    "program_title": "Late Show",
                }
            ]
        )

        await template_applier.apply(
            template, channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 1)
        )

        result = await db_session.execute(
            select(Program).where(Program.tenant_id == tenant_id)
        )
        program = result.scalar_one()
        assert program.title == "Late Show"
        assert program.description == "Late Show - Generated from template"
        assert program.category == "Other"
        assert program.duration == 90

    async def test_new_program_takes_slot_fields(
        self,
        template_applier: TemplateApplier,
        db_session,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        await template_applier.apply(
            get_template("movies-weekend"),
            channel_id,
            tenant_id,
            date(2024, 1, 6),
            date(2024, 1, 6),
        )

        result = await db_session.execute(
            select(Program).where(
                Program.tenant_id == tenant_id, Program.title == "Action Movie"
            )
        )
        program = result.scalar_one()
        assert program.category == "Action"
        assert program.duration == 150

    async def test_programs_committed_even_when_all_candidates_fail(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        program_id: uuid.UUID,
        make_schedule,
        count_programs,
    ) -> None:
        template = custom_template()
        await make_schedule(
            channel_id, program_id, utc(2024, 1, 1, 0), utc(2024, 1, 2, 0)
        )

        result = await template_applier.apply(
            template, channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 1)
        )

        assert result.stats.failed == 1
        # fixture program + Untitled Hour
        assert await count_programs(tenant_id) == 2


class TestApplyValidation:
    async def test_foreign_channel_not_found(
        self,
        template_applier: TemplateApplier,
        foreign_channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        count_programs,
    ) -> None:
        with pytest.raises(NotFoundError):
            await template_applier.apply(
                get_template("news-morning"),
                foreign_channel_id,
                tenant_id,
                date(2024, 1, 1),
                date(2024, 1, 1),
            )
        assert await count_programs(tenant_id) == 0

    async def test_missing_channel_not_found(
        self, template_applier: TemplateApplier, tenant_id: uuid.UUID
    ) -> None:
        with pytest.raises(NotFoundError, match="Channel"):
            await template_applier.apply(
                get_template("news-morning"),
                uuid.uuid4(),
                tenant_id,
                date(2024, 1, 1),
                date(2024, 1, 1),
            )

    async def test_inactive_template_rejected(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        inactive = get_template("news-morning").model_copy(update={"is_active": False})

        with pytest.raises(ValidationError, match="not active"):
            await template_applier.apply(
                inactive, channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 1)
            )

    async def test_inverted_range_rejected(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        with pytest.raises(ValidationError):
            await template_applier.apply(
                get_template("news-morning"),
                channel_id,
                tenant_id,
                date(2024, 1, 7),
                date(2024, 1, 1),
            )

    async def test_range_limit(
        self,
        store: ScheduleStore,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        applier = TemplateApplier(store, settings=Settings(TEMPLATE_MAX_RANGE_DAYS=7))

        ok = await applier.apply(
            get_template("religious-sunday"),
            channel_id,
            tenant_id,
            date(2024, 1, 1),
            date(2024, 1, 7),
        )
        assert ok.stats.total == 3

        with pytest.raises(ValidationError, match="exceeds the limit of 7 days"):
            await applier.apply(
                get_template("religious-sunday"),
                channel_id,
                tenant_id,
                date(2024, 1, 1),
                date(2024, 1, 8),
            )


class TestApplyById:
    async def test_unknown_template(
        self,
        template_applier: TemplateApplier,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        with pytest.raises(NotFoundError, match="Template"):
            await template_applier.apply_by_id(
                "nope", channel_id, tenant_id, date(2024, 1, 1), date(2024, 1, 1)
            )

    async def test_apply_request(
        self,
        template_applier: TemplateApplier,
        db_session,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
    ) -> None:
        request = TemplateApplyRequest(
            template_id="kids-afternoon",
            channel_id=channel_id,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 2),
        )

        result = await template_applier.apply_request(request, tenant_id)

        assert result.stats.created == 6
        rows = await db_session.execute(
            select(Schedule.start_time)
            .where(Schedule.channel_id == channel_id)
            .order_by(Schedule.start_time)
        )
        assert rows.scalars().first() == utc(2024, 1, 1, 15)


class TestBuildCandidates:
    def test_cross_product(self, template_applier: TemplateApplier) -> None:
        channel_id = uuid.uuid4()
        template = get_template("music-night")

        candidates = template_applier.build_candidates(
            template,
            channel_id,
            [date(2024, 1, 1), date(2024, 1, 2)],
            template_applier.settings.schedule_zone,
        )

        assert len(candidates) == 6
        assert [c.program_title for c in candidates[:3]] == [
            "Classical Music",
            "Jazz Night",
            "Rock Music",
        ]
        assert candidates[1].end_time == utc(2024, 1, 2, 0)
        assert candidates[2].start_time == utc(2024, 1, 1, 0)
        assert all(c.channel_id == channel_id for c in candidates)

    def test_carries_slot_flags(self, template_applier: TemplateApplier) -> None:
        template = get_template("sports-weekend")

        candidates = template_applier.build_candidates(
            template,
            uuid.uuid4(),
            [date(2024, 1, 6)],
            template_applier.settings.schedule_zone,
        )

        assert [c.is_live for c in candidates] == [False, True, False]
        assert candidates[1].start_time.timetz() == time(14, 0, tzinfo=UTC)
