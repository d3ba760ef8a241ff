"""Bulk template application.

Applying a template to a channel over a date range:

1. Validate the channel (tenant-scoped), the template and the range.
2. Resolve one program per distinct slot title, reusing the tenant's
   oldest program with that title or creating it.
3. Expand the recurrence and combine every date with every slot into a
   candidate interval.
4. Persist candidates one by one. Each candidate is checked and written in
   its own channel-locked transaction; a candidate that conflicts is
   skipped and counted, never aborting the batch.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from channel_scheduler.core.config import Settings, get_settings
from channel_scheduler.core.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from channel_scheduler.core.logging import LogContext
from channel_scheduler.schemas.schedule import (
    ScheduleResponse,
    SkippedCandidate,
    TemplateApplyRequest,
    TemplateApplyResult,
    TemplateApplyStats,
)
from channel_scheduler.services.schedule.catalog import get_template
from channel_scheduler.services.schedule.overlap import OverlapChecker
from channel_scheduler.services.schedule.recurrence import expand_recurrence

if TYPE_CHECKING:
    from channel_scheduler.schemas.template import ScheduleTemplate, TimeSlot
    from channel_scheduler.services.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_CATEGORY = "Other"


@dataclass(frozen=True, slots=True)
class CandidateSchedule:
    """A schedule proposed by template expansion, not yet persisted."""

    channel_id: uuid.UUID
    program_title: str
    start_time: datetime
    end_time: datetime
    is_live: bool = False
    is_new: bool = False


class TemplateApplier:
    """Materializes schedule templates into concrete schedules.

    Conflicts are handled with a skip-and-count policy: a candidate whose
    interval is taken is reported in ``skipped`` and ``stats.failed``.
    Any other storage error propagates; candidates committed before it
    stay committed.

    Attributes:
        store: Persistence gateway
        checker: Overlap checker over the same store
        settings: Default zone and range limit
    """

    def __init__(self, store: ScheduleStore, settings: Settings | None = None) -> None:
        self.store = store
        self.checker = OverlapChecker(store)
        self.settings = settings or get_settings()

    async def apply_by_id(
        self,
        template_id: str,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        start_date: date,
        end_date: date,
        timezone: str | None = None,
    ) -> TemplateApplyResult:
        """Apply the catalog template with id ``template_id``.

        Raises:
            NotFoundError: If the template or the channel does not exist
        """
        template = get_template(template_id)
        return await self.apply(
            template,
            channel_id=channel_id,
            tenant_id=tenant_id,
            start_date=start_date,
            end_date=end_date,
            timezone=timezone,
        )

    async def apply_request(
        self,
        request: TemplateApplyRequest,
        tenant_id: uuid.UUID,
    ) -> TemplateApplyResult:
        return await self.apply_by_id(
            request.template_id,
            channel_id=request.channel_id,
            tenant_id=tenant_id,
            start_date=request.start_date,
            end_date=request.end_date,
            timezone=request.timezone,
        )

    async def apply(
        self,
        template: ScheduleTemplate,
        channel_id: uuid.UUID,
        tenant_id: uuid.UUID,
        start_date: date,
        end_date: date,
        timezone: str | None = None,
    ) -> TemplateApplyResult:
        """Apply ``template`` to a channel for ``[start_date, end_date]``.

        Args:
            template: Template to materialize
            channel_id: Target channel
            tenant_id: Tenant that must own the channel
            start_date: First date of the range (inclusive)
            end_date: Last date of the range (inclusive)
            timezone: IANA zone for slot wall-clock times; defaults to
                ``SCHEDULE_TIMEZONE``

        Returns:
            TemplateApplyResult: Created schedules, skipped candidates and
                counts with ``total == created + failed``

        Raises:
            NotFoundError: If the channel does not belong to the tenant
            ValidationError: If the template is inactive, the range is
                inverted or too long, or the zone is unknown
        """
        channel = await self.store.get_channel(channel_id, tenant_id=tenant_id)
        if channel is None:
            raise NotFoundError("channel", channel_id)

        self._validate(template, start_date, end_date)
        zone = self._resolve_zone(timezone)

        with LogContext(template_id=template.id, channel_id=str(channel_id)):
            program_ids = await self.resolve_programs(template, tenant_id)

            dates = expand_recurrence(template.recurrence, start_date, end_date)
            candidates = self.build_candidates(template, channel_id, dates, zone)

            created: list[ScheduleResponse] = []
            skipped: list[SkippedCandidate] = []

            for candidate in candidates:
                try:
                    response = await self._persist(
                        candidate, program_ids[candidate.program_title]
                    )
                except ConflictError as e:
                    logger.warning(
                        "Skipping overlapping schedule: %s at %s",
                        candidate.program_title,
                        candidate.start_time.isoformat(),
                        extra={"context": {"conflicting_id": str(e.conflicting_id)}},
                    )
                    skipped.append(
                        SkippedCandidate(
                            program_title=candidate.program_title,
                            start_time=candidate.start_time,
                            end_time=candidate.end_time,
                            conflicting_schedule_id=e.conflicting_id,
                        )
                    )
                except ValidationError:
                    # Slot collapsed to an empty interval across a DST change
                    logger.warning(
                        "Skipping empty interval: %s at %s",
                        candidate.program_title,
                        candidate.start_time.isoformat(),
                    )
                    skipped.append(
                        SkippedCandidate(
                            program_title=candidate.program_title,
                            start_time=candidate.start_time,
                            end_time=candidate.end_time,
                        )
                    )
                else:
                    created.append(response)

            stats = TemplateApplyStats(
                total=len(candidates),
                created=len(created),
                failed=len(skipped),
            )
            logger.info(
                "Applied template %s to channel %s: %d/%d created",
                template.id,
                channel_id,
                stats.created,
                stats.total,
            )

        return TemplateApplyResult(
            success=True,
            message=self._summary(stats),
            created_schedules=created,
            skipped=skipped,
            stats=stats,
        )

    async def resolve_programs(
        self,
        template: ScheduleTemplate,
        tenant_id: uuid.UUID,
    ) -> dict[str, uuid.UUID]:
        """Map each distinct slot title to a program id, creating as needed.

        New programs take their description, category and duration from the
        first slot carrying the title. Resolved programs are committed
        before any schedule is written.
        """
        first_slots: dict[str, TimeSlot] = {}
        for slot in template.time_slots:
            first_slots.setdefault(slot.program_title, slot)

        program_ids: dict[str, uuid.UUID] = {}
        for title, slot in first_slots.items():
            program = await self.store.find_program_by_title(tenant_id, title)
            if program is None:
                program = await self.store.create_program(
                    tenant_id=tenant_id,
                    title=title,
                    description=(
                        slot.program_description or f"{title} - Generated from template"
                    ),
                    category=slot.program_category or DEFAULT_PROGRAM_CATEGORY,
                    duration=slot.duration_minutes,
                )
                logger.info("Created program '%s' from template slot", title)
            program_ids[title] = program.id

        await self.store.commit()
        return program_ids

    def build_candidates(
        self,
        template: ScheduleTemplate,
        channel_id: uuid.UUID,
        dates: list[date],
        zone: ZoneInfo,
    ) -> list[CandidateSchedule]:
        """Combine every date with every slot, dates outer and slots inner.

        Slot times are read as wall-clock times in ``zone`` and converted
        to UTC. A slot that crosses midnight ends on the following day.
        """
        candidates: list[CandidateSchedule] = []
        for day in dates:
            for slot in template.time_slots:
                end_day = day + timedelta(days=1) if slot.crosses_midnight else day
                start = datetime.combine(day, slot.start_time, tzinfo=zone)
                end = datetime.combine(end_day, slot.end_time, tzinfo=zone)
                candidates.append(
                    CandidateSchedule(
                        channel_id=channel_id,
                        program_title=slot.program_title,
                        start_time=start.astimezone(UTC),
                        end_time=end.astimezone(UTC),
                        is_live=slot.is_live,
                        is_new=slot.is_new,
                    )
                )
        return candidates

    async def _persist(
        self,
        candidate: CandidateSchedule,
        program_id: uuid.UUID,
    ) -> ScheduleResponse:
        async with self.store.channel_transaction(candidate.channel_id):
            await self.checker.ensure_no_conflict(
                candidate.channel_id, candidate.start_time, candidate.end_time
            )
            schedule = await self.store.create(
                channel_id=candidate.channel_id,
                program_id=program_id,
                start_time=candidate.start_time,
                end_time=candidate.end_time,
                is_live=candidate.is_live,
                is_new=candidate.is_new,
            )
            response = ScheduleResponse.model_validate(schedule)
        return response

    def _validate(
        self,
        template: ScheduleTemplate,
        start_date: date,
        end_date: date,
    ) -> None:
        if not template.is_active:
            raise ValidationError(
                f"Template '{template.id}' is not active", field="template_id"
            )
        if end_date < start_date:
            raise ValidationError(
                "end_date must not be before start_date",
                field="end_date",
                details={
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
            )
        days = (end_date - start_date).days + 1
        limit = self.settings.TEMPLATE_MAX_RANGE_DAYS
        if days > limit:
            raise ValidationError(
                f"Date range of {days} days exceeds the limit of {limit} days",
                field="end_date",
                details={"days": days, "limit": limit},
            )

    def _resolve_zone(self, timezone: str | None) -> ZoneInfo:
        if timezone is None:
            return self.settings.schedule_zone
        try:
            return ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValidationError(
                f"Unknown timezone: {timezone}", field="timezone"
            ) from e

    @staticmethod
    def _summary(stats: TemplateApplyStats) -> str:
        message = f"Template applied successfully. Created {stats.created} schedules"
        if stats.failed > 0:
            message += f" ({stats.failed} failed due to conflicts)"
        return message


__all__ = [
    "CandidateSchedule",
    "TemplateApplier",
]
