"""Schedule conflict and recurrence engine.

- ScheduleStore: persistence gateway with per-channel write transactions
- OverlapChecker: half-open interval conflict checks
- expand / expand_recurrence: recurrence date expansion
- TemplateApplier: bulk template materialization (skip on conflict)
- ScheduleCopier: schedule duplication (fail on conflict)
- ScheduleService: single-schedule create/read/update/delete
"""

from channel_scheduler.services.schedule.applier import (
    CandidateSchedule,
    TemplateApplier,
)
from channel_scheduler.services.schedule.catalog import (
    COMMON_SCHEDULE_TEMPLATES,
    get_template,
    get_template_by_id,
    get_templates_by_category,
    get_templates_by_pattern,
    list_templates,
)
from channel_scheduler.services.schedule.copier import ScheduleCopier
from channel_scheduler.services.schedule.overlap import (
    OverlapChecker,
    intervals_overlap,
    validate_interval,
)
from channel_scheduler.services.schedule.recurrence import (
    build_recurrence,
    expand,
    expand_recurrence,
)
from channel_scheduler.services.schedule.service import ScheduleService
from channel_scheduler.services.schedule.store import ScheduleStore

__all__ = [
    "COMMON_SCHEDULE_TEMPLATES",
    "CandidateSchedule",
    "OverlapChecker",
    "ScheduleCopier",
    "ScheduleService",
    "ScheduleStore",
    "TemplateApplier",
    "build_recurrence",
    "expand",
    "expand_recurrence",
    "get_template",
    "get_template_by_id",
    "get_templates_by_category",
    "get_templates_by_pattern",
    "intervals_overlap",
    "list_templates",
    "validate_interval",
]
