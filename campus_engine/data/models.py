"""Pydantic models for the canonical event, course and search shapes.

Attributes are snake_case in Python; every model dumps with the camelCase
field names the presentation layer consumes (``model_dump(by_alias=True)``)
and accepts either spelling on input.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    TypeAdapter,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from campus_engine.data.types import (
    CourseLevel,
    CourseStatus,
    EventType,
    Priority,
    SourceKind,
)
from campus_engine.normalize.dates import all_day_bounds
from campus_engine.query.availability import Availability, availability


class CampusModel(BaseModel):
    """Base model carrying the camelCase wire aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _capacity_issues(capacity: Optional[int], enrolled: Optional[int]) -> list[str]:
    issues: list[str] = []
    if enrolled is not None and enrolled < 0:
        issues.append("negative_enrollment")
    if capacity is not None and enrolled is not None and enrolled > capacity:
        issues.append("over_capacity")
    return issues


# ======================================================================
# Calendar events
# ======================================================================


class CanonicalEvent(CampusModel):
    """Source-independent calendar event.

    All-day events are stored with ``start`` at midnight and ``end`` at the
    exclusive midnight closing the last covered day.  Capacity or ordering
    problems are not corrected; they show up in :attr:`inconsistencies`.
    """

    id: str
    title: str
    description: str = ""
    type: EventType
    start: AwareDatetime
    end: AwareDatetime
    is_all_day: bool = False
    location: str = ""
    instructor: Optional[str] = None
    capacity: Optional[int] = None
    enrolled: Optional[int] = None
    priority: Priority = Priority.NORMAL
    weather_dependent: bool = False
    source: SourceKind = SourceKind.CALENDAR
    course: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    color: str = ""
    is_recurring: bool = False
    registration_required: bool = False

    @model_validator(mode="after")
    def _truncate_all_day(self) -> CanonicalEvent:
        if self.is_all_day and self.start <= self.end:
            self.start, self.end = all_day_bounds(self.start, self.end)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inconsistencies(self) -> list[str]:
        issues = _capacity_issues(self.capacity, self.enrolled)
        if self.start > self.end:
            issues.insert(0, "start_after_end")
        return issues

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inconsistent(self) -> bool:
        return bool(self.inconsistencies)

    @property
    def availability(self) -> Optional[Availability]:
        """Seat availability, or None for events without a capacity."""
        if self.capacity is None:
            return None
        return availability(self.capacity, self.enrolled or 0)


# ======================================================================
# Courses
# ======================================================================


class CourseSchedule(CampusModel):
    days: list[str] = Field(default_factory=list)
    time: str = ""
    location: str = ""


class Course(CampusModel):
    """A catalog course.  ``enrolled`` is owned by the enrollment service."""

    id: str
    code: str
    title: str
    department: str
    credits: PositiveInt
    schedule: CourseSchedule = Field(default_factory=CourseSchedule)
    instructor: str = ""
    capacity: int
    enrolled: int = 0
    status: CourseStatus
    level: CourseLevel
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    prerequisites: list[str] = Field(default_factory=list)
    semester: str = ""
    waitlist: int = 0

    @field_validator("status", "level", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inconsistencies(self) -> list[str]:
        return _capacity_issues(self.capacity, self.enrolled)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inconsistent(self) -> bool:
        return bool(self.inconsistencies)

    @property
    def availability(self) -> Availability:
        return availability(self.capacity, self.enrolled)


# ======================================================================
# Search results
# ======================================================================


class SearchRecord(CampusModel):
    """Fields shared by every search result variant."""

    id: str
    title: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    def searchable_text(self) -> list[str]:
        """Field values a free-text query is matched against."""
        return [self.title or ""]

    @property
    def display_title(self) -> str:
        return self.title or getattr(self, "full_name", "") or ""


class ProgramResult(SearchRecord):
    search_type: Literal["program"] = "program"
    slug: str = ""
    type: str = ""
    duration: str = ""
    description: str = ""
    featured: bool = False

    def searchable_text(self) -> list[str]:
        return [self.title or "", self.description, self.category or "", self.type]


class PersonRecord(SearchRecord):
    """Search variants describing a named person."""

    first_name: str = ""
    last_name: str = ""
    full_name: str = ""

    @model_validator(mode="after")
    def _fill_full_name(self) -> PersonRecord:
        if not self.full_name:
            self.full_name = f"{self.first_name} {self.last_name}".strip()
        return self


class FacultyResult(PersonRecord):
    search_type: Literal["faculty"] = "faculty"
    department: str = ""
    specialization: list[str] = Field(default_factory=list)
    bio: str = ""

    def searchable_text(self) -> list[str]:
        return [
            self.full_name,
            self.title or "",
            self.department,
            *self.specialization,
            self.bio,
        ]


class NewsResult(SearchRecord):
    search_type: Literal["news"] = "news"
    excerpt: str = ""
    author: Optional[str] = None
    publish_date: Optional[str] = None

    def searchable_text(self) -> list[str]:
        return [self.title or "", self.excerpt, self.category or "", self.author or ""]


class EventResult(SearchRecord):
    search_type: Literal["event"] = "event"
    description: str = ""
    location: Optional[str] = None

    def searchable_text(self) -> list[str]:
        return [
            self.title or "",
            self.description,
            self.category or "",
            self.location or "",
        ]


class AlumniResult(PersonRecord):
    search_type: Literal["alumni"] = "alumni"
    graduation_year: Optional[int] = None
    current_position: str = ""
    current_organization: str = ""
    program: str = ""
    industry: str = ""
    skills: list[str] = Field(default_factory=list)

    def searchable_text(self) -> list[str]:
        return [
            self.full_name,
            self.current_position,
            self.current_organization,
            self.program,
            self.industry,
            *self.skills,
        ]


class PageResult(SearchRecord):
    search_type: Literal["page"] = "page"
    description: str = ""
    url: str = ""
    keywords: list[str] = Field(default_factory=list)

    def searchable_text(self) -> list[str]:
        return [self.title or "", self.description, *self.keywords]


SearchResult = Annotated[
    Union[
        ProgramResult,
        FacultyResult,
        NewsResult,
        EventResult,
        AlumniResult,
        PageResult,
    ],
    Field(discriminator="search_type"),
]

SEARCH_RESULT_ADAPTER: TypeAdapter[SearchResult] = TypeAdapter(SearchResult)


# ======================================================================
# Ingestion diagnostics
# ======================================================================


class Diagnostic(CampusModel):
    """One raw record skipped during ingestion."""

    source: str
    index: int
    record_id: Optional[str] = None
    reason: str
