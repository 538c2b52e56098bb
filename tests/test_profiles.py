"""Tests for campus_engine.data.profiles module."""

from __future__ import annotations

import pytest

from campus_engine.data.profiles import (
    DEFAULT_PROFILES,
    PRIORITY_ALIASES,
    SOURCE_DEFAULT_TYPES,
    lookup_profile,
)
from campus_engine.data.types import EventType, Priority, SourceKind


class TestProfiles:
    def test_every_canonical_type_has_a_profile(self) -> None:
        for event_type in EventType:
            assert DEFAULT_PROFILES[event_type.value].event_type == event_type

    def test_every_source_has_a_default_type(self) -> None:
        for source in SourceKind:
            assert SOURCE_DEFAULT_TYPES[source] in DEFAULT_PROFILES

    def test_lookup_case_insensitive(self) -> None:
        assert lookup_profile(" Deadline ").default_priority == Priority.HIGH

    def test_lookup_unknown(self) -> None:
        with pytest.raises(KeyError):
            lookup_profile("party")

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_PROFILES["party"] = DEFAULT_PROFILES["event"]  # type: ignore[index]

    def test_priority_aliases_cover_canonical_values(self) -> None:
        for priority in Priority:
            assert PRIORITY_ALIASES[priority.value] == priority
