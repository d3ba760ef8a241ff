"""Business logic services.

This package contains service classes that implement business logic.
"""

from channel_scheduler.services.schedule import (
    OverlapChecker,
    ScheduleCopier,
    ScheduleService,
    ScheduleStore,
    TemplateApplier,
)

__all__ = [
    "OverlapChecker",
    "ScheduleCopier",
    "ScheduleService",
    "ScheduleStore",
    "TemplateApplier",
]
