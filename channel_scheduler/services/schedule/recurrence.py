"""Recurrence expansion.

Turns a recurrence definition and an inclusive date range into the
ascending list of calendar dates it selects. Expansion is a pure function
of its inputs.

Weekdays are numbered 0=Sunday .. 6=Saturday. Monthly recurrences only
produce dates that exist: ``day_of_month=31`` contributes nothing for
February, April, June, September and November. A weekly recurrence
without weekdays, or a monthly one without a day, selects no dates.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import assert_never

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, rrule
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from channel_scheduler.core.exceptions import ValidationError
from channel_scheduler.models.enums import RecurrencePattern, Weekday
from channel_scheduler.schemas.template import (
    DailyRecurrence,
    MonthlyRecurrence,
    Recurrence,
    WeeklyRecurrence,
)


_RRULE_WEEKDAYS = {
    Weekday.SUNDAY: SU,
    Weekday.MONDAY: MO,
    Weekday.TUESDAY: TU,
    Weekday.WEDNESDAY: WE,
    Weekday.THURSDAY: TH,
    Weekday.FRIDAY: FR,
    Weekday.SATURDAY: SA,
}
_WEEKDAYS_ONLY = tuple(
    rule_day for day, rule_day in _RRULE_WEEKDAYS.items() if not day.is_weekend
)

_recurrence_adapter: TypeAdapter[Recurrence] = TypeAdapter(Recurrence)


def build_recurrence(
    pattern: RecurrencePattern | str,
    days_of_week: list[int] | set[int] | frozenset[int] | None = None,
    day_of_month: int | None = None,
    exclude_weekends: bool = False,
) -> Recurrence:
    """Build the recurrence variant for a pattern and its loose fields.

    Only the field the pattern uses is read; the others are ignored.

    Raises:
        ValidationError: If the pattern is unknown or its field is out of
            range
    """
    pattern_value = pattern.value if isinstance(pattern, RecurrencePattern) else pattern
    data: dict[str, object] = {"pattern": pattern_value}

    if pattern_value == RecurrencePattern.DAILY.value:
        data["exclude_weekends"] = exclude_weekends
    elif pattern_value == RecurrencePattern.WEEKLY.value:
        if days_of_week is not None:
            data["days_of_week"] = frozenset(days_of_week)
    elif pattern_value == RecurrencePattern.MONTHLY.value:
        if day_of_month is not None:
            data["day_of_month"] = day_of_month

    try:
        return _recurrence_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid {pattern_value!r} recurrence",
            field="recurrence",
            details={"errors": e.errors(include_url=False)},
        ) from e


def expand_recurrence(
    recurrence: Recurrence,
    start_date: date,
    end_date: date,
) -> list[date]:
    """Expand ``recurrence`` over ``[start_date, end_date]`` (both inclusive).

    Returns:
        list[date]: Strictly ascending dates; empty when the range is inverted
    """
    if start_date > end_date:
        return []

    dtstart = datetime.combine(start_date, time.min)
    until = datetime.combine(end_date, time.min)

    match recurrence:
        case DailyRecurrence(exclude_weekends=True):
            rule = rrule(DAILY, dtstart=dtstart, until=until, byweekday=_WEEKDAYS_ONLY)
        case DailyRecurrence():
            rule = rrule(DAILY, dtstart=dtstart, until=until)
        case WeeklyRecurrence(days_of_week=days_of_week):
            # rrule treats an empty byweekday as "the weekday of dtstart"
            if not days_of_week:
                return []
            rule = rrule(
                WEEKLY,
                dtstart=dtstart,
                until=until,
                byweekday=[_RRULE_WEEKDAYS[Weekday(day)] for day in sorted(days_of_week)],
            )
        case MonthlyRecurrence(day_of_month=None):
            return []
        case MonthlyRecurrence(day_of_month=day_of_month):
            # rrule skips months in which the day does not exist
            rule = rrule(MONTHLY, dtstart=dtstart, until=until, bymonthday=day_of_month)
        case _:
            assert_never(recurrence)

    return [occurrence.date() for occurrence in rule]


def expand(
    pattern: RecurrencePattern | str,
    start_date: date,
    end_date: date,
    days_of_week: list[int] | set[int] | frozenset[int] | None = None,
    day_of_month: int | None = None,
    exclude_weekends: bool = False,
) -> list[date]:
    """Expand a recurrence given in loose pattern/field form.

    Examples:
        >>> expand("daily", date(2024, 1, 1), date(2024, 1, 7), exclude_weekends=True)
        [date(2024, 1, 1), ..., date(2024, 1, 5)]
        >>> expand("monthly", date(2024, 1, 1), date(2024, 4, 30), day_of_month=31)
        [date(2024, 1, 31), date(2024, 3, 31)]
    """
    recurrence = build_recurrence(
        pattern,
        days_of_week=days_of_week,
        day_of_month=day_of_month,
        exclude_weekends=exclude_weekends,
    )
    return expand_recurrence(recurrence, start_date, end_date)


__all__ = [
    "build_recurrence",
    "expand",
    "expand_recurrence",
]
