"""Declarative filtering and sorting for the course catalog."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

from pydantic import field_validator

from campus_engine.data.models import CampusModel, Course
from campus_engine.data.types import CourseSortKey, CourseStatus

ALL_DEPARTMENTS = "All Departments"
ALL_TIMES = "All Times"
ALL_CREDITS = "All Credits"
ALL_LEVELS = "All Levels"

MORNING = "Morning (8:00 AM - 12:00 PM)"
AFTERNOON = "Afternoon (12:00 PM - 5:00 PM)"
EVENING = "Evening (5:00 PM - 9:00 PM)"
WEEKEND = "Weekend (Saturday - Sunday)"

ONE_TO_TWO_CREDITS = "1-2 Credits"
THREE_CREDITS = "3 Credits"
FOUR_PLUS_CREDITS = "4+ Credits"

# Start-hour windows, [from, to)
_HOUR_WINDOWS: dict[str, tuple[int, int]] = {
    MORNING: (8, 12),
    AFTERNOON: (12, 17),
    EVENING: (17, 21),
}
_WEEKEND_DAYS = {"saturday", "sunday"}

TIME_SLOTS = [ALL_TIMES, MORNING, AFTERNOON, EVENING, WEEKEND]
CREDIT_OPTIONS = [ALL_CREDITS, ONE_TO_TWO_CREDITS, THREE_CREDITS, FOUR_PLUS_CREDITS]
LEVEL_OPTIONS = [ALL_LEVELS, "Beginner", "Intermediate", "Advanced"]

_SENTINELS = {"all", ALL_DEPARTMENTS.lower(), ALL_TIMES.lower(), ALL_CREDITS.lower(), ALL_LEVELS.lower()}

_START_TIME_RE = re.compile(r"(?P<h>\d{1,2})(?::(?P<m>\d{2}))?\s*(?P<ampm>[AaPp][Mm])?")


def _is_unset(value: Optional[str]) -> bool:
    return value is None or not value.strip() or value.strip().lower() in _SENTINELS


class CourseFilters(CampusModel):
    """Recognized course filter options.

    Each option may be None, ``"All"`` or its ``"All ..."`` sentinel, all of
    which mean "do not filter on this".
    """

    department: Optional[str] = None
    time_slot: Optional[str] = None
    credits: Optional[str] = None
    level: Optional[str] = None
    search_term: str = ""

    @field_validator("time_slot")
    @classmethod
    def _known_time_slot(cls, value: Optional[str]) -> Optional[str]:
        if not _is_unset(value) and value not in TIME_SLOTS:
            raise ValueError(f"unknown time slot {value!r}")
        return value

    @field_validator("credits")
    @classmethod
    def _known_credits(cls, value: Optional[str]) -> Optional[str]:
        if not _is_unset(value) and value not in CREDIT_OPTIONS:
            raise ValueError(f"unknown credit option {value!r}")
        return value


def start_hour(schedule_time: str) -> Optional[int]:
    """24-hour start hour of a schedule string like ``"2:00 PM - 4:00 PM"``."""
    m = _START_TIME_RE.search(schedule_time or "")
    if not m:
        return None
    hour = int(m.group("h"))
    ampm = m.group("ampm")
    if ampm is None:
        # "10:00 - 11:30 AM": borrow the first meridiem in the string
        later = re.search(r"[AaPp][Mm]", schedule_time[m.end():])
        ampm = later.group(0) if later else None
    if ampm:
        ampm = ampm.upper()
        if ampm == "PM" and hour != 12:
            hour += 12
        elif ampm == "AM" and hour == 12:
            hour = 0
    return hour


def _matches_time_slot(course: Course, slot: str) -> bool:
    if slot == WEEKEND:
        return any(day.strip().lower() in _WEEKEND_DAYS for day in course.schedule.days)
    hour = start_hour(course.schedule.time)
    if hour is None:
        return False
    low, high = _HOUR_WINDOWS[slot]
    return low <= hour < high


def _matches_credits(course: Course, option: str) -> bool:
    if option == ONE_TO_TWO_CREDITS:
        return course.credits <= 2
    if option == THREE_CREDITS:
        return course.credits == 3
    return course.credits >= 4


def _matches_search(course: Course, term: str) -> bool:
    needle = term.strip().lower()
    haystack = " ".join(
        [course.title, course.code, course.instructor, course.description, *course.tags]
    ).lower()
    return needle in haystack


def apply_filters(courses: Iterable[Course], filters: CourseFilters | dict) -> list[Course]:
    """Return the courses passing every active filter, in input order."""
    if not isinstance(filters, CourseFilters):
        filters = CourseFilters.model_validate(filters)

    checks: list[Callable[[Course], bool]] = []
    if not _is_unset(filters.department):
        department = filters.department.strip()
        checks.append(lambda c: c.department == department)
    if not _is_unset(filters.time_slot):
        slot = filters.time_slot
        checks.append(lambda c: _matches_time_slot(c, slot))
    if not _is_unset(filters.credits):
        option = filters.credits
        checks.append(lambda c: _matches_credits(c, option))
    if not _is_unset(filters.level):
        level = filters.level.strip().lower()
        checks.append(lambda c: c.level.value == level)
    if filters.search_term.strip():
        term = filters.search_term
        checks.append(lambda c: _matches_search(c, term))

    return [course for course in courses if all(check(course) for check in checks)]


_SORT_KEYS: dict[CourseSortKey, Callable[[Course], object]] = {
    CourseSortKey.TITLE: lambda c: c.title.casefold(),
    CourseSortKey.DEPARTMENT: lambda c: c.department.casefold(),
    CourseSortKey.CREDITS: lambda c: -c.credits,
    CourseSortKey.AVAILABILITY: lambda c: -c.availability.percent,
}


def apply_sort(courses: Iterable[Course], key: CourseSortKey | str) -> list[Course]:
    """Stable sort; credits and availability sort descending."""
    return sorted(courses, key=_SORT_KEYS[CourseSortKey(key)])


def filter_options(courses: Iterable[Course]) -> dict[str, list[str]]:
    """Option lists for the filter controls, departments taken from *courses*."""
    departments = sorted({course.department for course in courses})
    return {
        "department": [ALL_DEPARTMENTS, *departments],
        "timeSlot": list(TIME_SLOTS),
        "credits": list(CREDIT_OPTIONS),
        "level": list(LEVEL_OPTIONS),
    }


def course_stats(courses: Iterable[Course]) -> dict[str, int]:
    """Catalog counters: total and per-status counts."""
    courses = list(courses)
    stats = {"total": len(courses)}
    for status in CourseStatus:
        stats[status.value] = sum(1 for c in courses if c.status == status)
    return stats
