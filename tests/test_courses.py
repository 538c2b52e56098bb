"""Tests for campus_engine.normalize.courses module."""

from __future__ import annotations

import pytest

from campus_engine.data.models import Diagnostic
from campus_engine.data.types import CourseLevel, CourseStatus
from campus_engine.normalize.courses import normalize_courses


NESTED = {
    "id": "MUS-101",
    "code": "MUS-101",
    "title": "Introduction to Caribbean Music",
    "department": "Music",
    "credits": 3,
    "schedule": {"days": ["Monday", "Wednesday"], "time": "10:00 AM - 11:30 AM", "location": "Music Hall 101"},
    "instructor": "Dr. James Roberts",
    "capacity": 25,
    "enrolled": 18,
    "status": "open",
    "level": "Beginner",
    "tags": ["Cultural Studies", "Music History"],
    "prerequisites": [],
    "semester": "Fall 2024",
}

# As exported to CSV: every value is text, lists are ";"-separated
FLAT = {
    "code": "ART-310",
    "title": "Traditional Bahamian Crafts",
    "department": "Visual Arts",
    "credits": "3",
    "days": "Saturday",
    "time": "9:00 AM - 1:00 PM",
    "location": "Craft Studio",
    "instructor": "Ms. Ivy Rolle",
    "capacity": "12",
    "enrolled": "4",
    "status": "Open",
    "level": "beginner",
    "tags": "Crafts; Heritage",
    "prerequisites": "",
    "description": "",
}


class TestNormalizeCourses:
    """Catalog records to Course models."""

    def test_nested_record(self) -> None:
        [course] = normalize_courses([NESTED])
        assert course.id == "MUS-101"
        assert course.level == CourseLevel.BEGINNER
        assert course.schedule.days == ["Monday", "Wednesday"]
        assert course.schedule.location == "Music Hall 101"
        assert course.tags == ["Cultural Studies", "Music History"]

    def test_flat_record(self) -> None:
        [course] = normalize_courses([FLAT])
        assert course.id == "ART-310"
        assert course.credits == 3
        assert course.capacity == 12
        assert course.status == CourseStatus.OPEN
        assert course.schedule.days == ["Saturday"]
        assert course.schedule.time == "9:00 AM - 1:00 PM"
        assert course.tags == ["Crafts", "Heritage"]
        assert course.prerequisites == []

    def test_invalid_credits_skipped(self) -> None:
        diagnostics: list[Diagnostic] = []
        courses = normalize_courses([{**NESTED, "credits": 0}, FLAT], diagnostics)
        assert [c.code for c in courses] == ["ART-310"]
        assert len(diagnostics) == 1
        assert diagnostics[0].source == "course_catalog"
        assert diagnostics[0].record_id == "MUS-101"
        assert "credits" in diagnostics[0].reason

    def test_missing_title_skipped(self) -> None:
        record = {k: v for k, v in NESTED.items() if k != "title"}
        diagnostics: list[Diagnostic] = []
        assert normalize_courses([record], diagnostics) == []
        assert "title" in diagnostics[0].reason

    def test_duplicate_skipped(self) -> None:
        diagnostics: list[Diagnostic] = []
        courses = normalize_courses([NESTED, NESTED], diagnostics)
        assert len(courses) == 1
        assert diagnostics[0].index == 1
        assert "duplicate" in diagnostics[0].reason

    @pytest.mark.parametrize(
        "overrides",
        [
            {"tags": 5},
            {"prerequisites": 3},
            {"schedule": {"days": 1, "time": "9:00 AM"}},
        ],
    )
    def test_wrong_container_type_skipped_rest_kept(self, overrides: dict) -> None:
        diagnostics: list[Diagnostic] = []
        bad = {**NESTED, "id": "MUS-102", "code": "MUS-102", **overrides}
        courses = normalize_courses([NESTED, bad], diagnostics)
        assert [c.code for c in courses] == ["MUS-101"]
        assert len(diagnostics) == 1
        assert diagnostics[0].record_id == "MUS-102"

    def test_non_mapping_skipped(self) -> None:
        diagnostics: list[Diagnostic] = []
        assert normalize_courses([42], diagnostics) == []
        assert diagnostics[0].record_id is None

    def test_over_capacity_kept_and_flagged(self) -> None:
        [course] = normalize_courses([{**NESTED, "enrolled": 30}])
        assert course.enrolled == 30
        assert course.inconsistent is True
