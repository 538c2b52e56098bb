"""Enumerations shared by the canonical models and the query layer."""

from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Canonical calendar event categories."""

    ACADEMIC = "academic"
    CULTURAL = "cultural"
    EXAM = "exam"
    ASSIGNMENT = "assignment"
    HOLIDAY = "holiday"
    WEATHER = "weather"
    EMERGENCY = "emergency"
    PERSONAL = "personal"


class Priority(str, Enum):
    """Event priority, ordered by :data:`PRIORITY_RANK`."""

    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


# Higher rank sorts first when start times tie
PRIORITY_RANK: dict[Priority, int] = {
    Priority.NORMAL: 0,
    Priority.HIGH: 1,
    Priority.URGENT: 2,
}


class SourceKind(str, Enum):
    """Origin of a raw event collection."""

    ACADEMIC_CALENDAR = "academic_calendar"
    PERSONAL = "personal"
    CULTURAL = "cultural"
    CALENDAR = "calendar"


class CourseStatus(str, Enum):
    OPEN = "open"
    WAITLIST = "waitlist"
    CLOSED = "closed"


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class AvailabilityBucket(str, Enum):
    """Coarse seat availability classification."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SearchType(str, Enum):
    """Discriminator for :data:`campus_engine.data.models.SearchResult`."""

    PROGRAM = "program"
    FACULTY = "faculty"
    NEWS = "news"
    EVENT = "event"
    ALUMNI = "alumni"
    PAGE = "page"


# Ordered as results are emitted by the search aggregator
SEARCH_TYPE_ORDER = [
    SearchType.PROGRAM,
    SearchType.FACULTY,
    SearchType.NEWS,
    SearchType.EVENT,
    SearchType.ALUMNI,
    SearchType.PAGE,
]


class DateRange(str, Enum):
    """Recency windows for search result filtering."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class ResultSort(str, Enum):
    RELEVANCE = "relevance"
    DATE = "date"
    ALPHABETICAL = "alphabetical"


class CourseSortKey(str, Enum):
    TITLE = "title"
    DEPARTMENT = "department"
    CREDITS = "credits"
    AVAILABILITY = "availability"
