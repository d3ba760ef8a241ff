"""Built-in schedule template catalog.

The catalog is static data validated into immutable ``ScheduleTemplate``
objects at import time. Weekday numbers use 0=Sunday .. 6=Saturday.
"""

from __future__ import annotations

from typing import Any

from channel_scheduler.core.exceptions import NotFoundError
from channel_scheduler.models.enums import RecurrencePattern, TemplateCategory
from channel_scheduler.schemas.template import ScheduleTemplate

_WEEKEND = [0, 6]
_WEEKDAYS = [1, 2, 3, 4, 5]


def _slot(
    slot_id: str,
    start: str,
    end: str,
    title: str,
    category: str,
    **flags: Any,
) -> dict[str, Any]:
    return {
        "id": slot_id,
        "start_time": start,
        "end_time": end,
        "program_title": title,
        "program_category": category,
        **flags,
    }


_CATALOG_DATA: list[dict[str, Any]] = [
    # News
    {
        "id": "news-morning",
        "name": "Morning News Block",
        "description": "Standard morning news programming with hourly updates",
        "category": "news",
        "pattern": "daily",
        "exclude_weekends": False,
        "time_slots": [
            _slot("1", "06:00", "07:00", "Morning Headlines", "News", is_live=True),
            _slot("2", "07:00", "08:00", "Breakfast News", "News", is_live=True),
            _slot("3", "08:00", "09:00", "Morning Update", "News", is_live=True),
        ],
    },
    {
        "id": "news-evening",
        "name": "Evening News Block",
        "description": "Prime time evening news programming",
        "category": "news",
        "pattern": "daily",
        "exclude_weekends": False,
        "time_slots": [
            _slot("1", "18:00", "19:00", "Evening News", "News", is_live=True),
            _slot("2", "19:00", "20:00", "Prime Time News", "News", is_live=True),
            _slot("3", "20:00", "21:00", "Nightly Report", "News", is_live=True),
        ],
    },
    # Entertainment
    {
        "id": "entertainment-weekend",
        "name": "Weekend Entertainment",
        "description": "Weekend entertainment programming with movies and shows",
        "category": "entertainment",
        "pattern": "weekly",
        "days_of_week": _WEEKEND,
        "time_slots": [
            _slot("1", "10:00", "12:00", "Weekend Movies", "Movies"),
            _slot("2", "14:00", "16:00", "Family Shows", "Entertainment"),
            _slot("3", "19:00", "21:00", "Prime Time Entertainment", "Entertainment"),
        ],
    },
    {
        "id": "entertainment-weekday",
        "name": "Weekday Entertainment",
        "description": "Weekday evening entertainment programming",
        "category": "entertainment",
        "pattern": "weekly",
        "days_of_week": _WEEKDAYS,
        "time_slots": [
            _slot("1", "19:00", "20:00", "Evening Soap Opera", "Drama"),
            _slot("2", "20:00", "21:00", "Reality Show", "Reality"),
            _slot("3", "21:00", "22:00", "Comedy Show", "Comedy"),
        ],
    },
    # Sports
    {
        "id": "sports-weekend",
        "name": "Weekend Sports",
        "description": "Weekend sports programming with live matches and highlights",
        "category": "sports",
        "pattern": "weekly",
        "days_of_week": _WEEKEND,
        "time_slots": [
            _slot("1", "09:00", "11:00", "Sports Highlights", "Sports"),
            _slot("2", "14:00", "17:00", "Live Sports Match", "Sports", is_live=True),
            _slot("3", "19:00", "21:00", "Sports Analysis", "Sports"),
        ],
    },
    # Kids
    {
        "id": "kids-afternoon",
        "name": "Kids Afternoon Block",
        "description": "Afternoon programming for children",
        "category": "kids",
        "pattern": "daily",
        "exclude_weekends": False,
        "time_slots": [
            _slot("1", "15:00", "16:00", "Cartoon Time", "Animation"),
            _slot("2", "16:00", "17:00", "Educational Show", "Educational"),
            _slot("3", "17:00", "18:00", "Kids Games", "Kids"),
        ],
    },
    # Music
    {
        "id": "music-night",
        "name": "Night Music Block",
        "description": "Late night music programming",
        "category": "music",
        "pattern": "daily",
        "exclude_weekends": False,
        "time_slots": [
            _slot("1", "22:00", "23:00", "Classical Music", "Music"),
            _slot("2", "23:00", "00:00", "Jazz Night", "Music"),
            _slot("3", "00:00", "01:00", "Rock Music", "Music"),
        ],
    },
    # Religious
    {
        "id": "religious-sunday",
        "name": "Sunday Religious Programming",
        "description": "Sunday religious and spiritual programming",
        "category": "religious",
        "pattern": "weekly",
        "days_of_week": [0],
        "time_slots": [
            _slot("1", "08:00", "09:00", "Morning Prayer", "Religious"),
            _slot("2", "10:00", "11:00", "Religious Service", "Religious", is_live=True),
            _slot("3", "18:00", "19:00", "Evening Devotion", "Religious"),
        ],
    },
    # Educational
    {
        "id": "educational-weekday",
        "name": "Weekday Educational Block",
        "description": "Educational programming during weekdays",
        "category": "educational",
        "pattern": "weekly",
        "days_of_week": _WEEKDAYS,
        "time_slots": [
            _slot("1", "10:00", "11:00", "Science Documentary", "Documentary"),
            _slot("2", "11:00", "12:00", "History Program", "Educational"),
            _slot("3", "12:00", "13:00", "Language Learning", "Educational"),
        ],
    },
    # Movies
    {
        "id": "movies-weekend",
        "name": "Weekend Movie Marathon",
        "description": "Weekend movie programming with different genres",
        "category": "movies",
        "pattern": "weekly",
        "days_of_week": _WEEKEND,
        "time_slots": [
            _slot("1", "14:00", "16:30", "Action Movie", "Action"),
            _slot("2", "16:30", "19:00", "Romance Movie", "Romance"),
            _slot("3", "19:00", "21:30", "Thriller Movie", "Thriller"),
        ],
    },
]

COMMON_SCHEDULE_TEMPLATES: tuple[ScheduleTemplate, ...] = tuple(
    ScheduleTemplate.model_validate(data) for data in _CATALOG_DATA
)

_TEMPLATES_BY_ID: dict[str, ScheduleTemplate] = {
    template.id: template for template in COMMON_SCHEDULE_TEMPLATES
}


def get_template_by_id(template_id: str) -> ScheduleTemplate | None:
    """Look up a catalog template by id."""
    return _TEMPLATES_BY_ID.get(template_id)


def get_template(template_id: str) -> ScheduleTemplate:
    """Look up a catalog template by id.

    Raises:
        NotFoundError: If no template has that id
    """
    template = get_template_by_id(template_id)
    if template is None:
        raise NotFoundError("template", template_id)
    return template


def list_templates(
    category: TemplateCategory | str | None = None,
    pattern: RecurrencePattern | str | None = None,
) -> list[ScheduleTemplate]:
    """List catalog templates, optionally filtered by category and pattern."""
    category_value = (
        category.value if isinstance(category, TemplateCategory) else category
    )
    pattern_value = pattern.value if isinstance(pattern, RecurrencePattern) else pattern

    return [
        template
        for template in COMMON_SCHEDULE_TEMPLATES
        if (category_value is None or template.category == category_value)
        and (pattern_value is None or template.recurrence.pattern == pattern_value)
    ]


def get_templates_by_category(category: TemplateCategory | str) -> list[ScheduleTemplate]:
    return list_templates(category=category)


def get_templates_by_pattern(pattern: RecurrencePattern | str) -> list[ScheduleTemplate]:
    return list_templates(pattern=pattern)


__all__ = [
    "COMMON_SCHEDULE_TEMPLATES",
    "get_template",
    "get_template_by_id",
    "get_templates_by_category",
    "get_templates_by_pattern",
    "list_templates",
]
