"""Tests for campus_engine.query.calendar module."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
from dateutil import tz

from campus_engine.data.models import CanonicalEvent
from campus_engine.data.types import EventType, Priority
from campus_engine.query.calendar import (
    count_by_type,
    events_by_priority,
    events_by_type,
    events_for_date,
    events_in_range,
    upcoming_events,
    weather_dependent_events,
)

NASSAU = tz.gettz("America/Nassau")


def _at(*args: int) -> datetime:
    return datetime(*args, tzinfo=NASSAU)


def _event(
    event_id: str,
    start: datetime,
    end: datetime,
    *,
    title: str | None = None,
    event_type: EventType = EventType.ACADEMIC,
    priority: Priority = Priority.NORMAL,
    **fields,
) -> CanonicalEvent:
    return CanonicalEvent(
        id=event_id,
        title=title or event_id,
        type=event_type,
        start=start,
        end=end,
        priority=priority,
        **fields,
    )


@pytest.fixture
def workshop() -> CanonicalEvent:
    return _event("workshop", _at(2024, 7, 20, 14, 0), _at(2024, 7, 20, 17, 0), event_type=EventType.CULTURAL)


# ======================================================================
# events_for_date
# ======================================================================


class TestEventsForDate:
    """Interval overlap with a calendar day."""

    def test_timed_event_on_its_day(self, workshop: CanonicalEvent) -> None:
        assert events_for_date([workshop], date(2024, 7, 20)) == [workshop]

    def test_timed_event_not_on_next_day(self, workshop: CanonicalEvent) -> None:
        assert events_for_date([workshop], date(2024, 7, 21)) == []

    def test_overnight_event_on_both_days(self) -> None:
        gala = _event("gala", _at(2024, 7, 20, 22, 0), _at(2024, 7, 21, 1, 0))
        assert events_for_date([gala], date(2024, 7, 20)) == [gala]
        assert events_for_date([gala], date(2024, 7, 21)) == [gala]

    def test_end_at_midnight_is_exclusive(self) -> None:
        late = _event("late", _at(2024, 7, 20, 22, 0), _at(2024, 7, 21, 0, 0))
        assert events_for_date([late], date(2024, 7, 21)) == []

    def test_single_all_day_event(self) -> None:
        holiday = _event(
            "independence", _at(2024, 7, 10), _at(2024, 7, 11), is_all_day=True, event_type=EventType.HOLIDAY
        )
        assert events_for_date([holiday], date(2024, 7, 10)) == [holiday]
        assert events_for_date([holiday], date(2024, 7, 11)) == []
        assert events_for_date([holiday], date(2024, 7, 9)) == []

    def test_multi_day_all_day_event(self) -> None:
        closure = _event(
            "closure", _at(2024, 9, 10), _at(2024, 9, 13), is_all_day=True, event_type=EventType.WEATHER
        )
        for day in (10, 11, 12):
            assert events_for_date([closure], date(2024, 9, day)) == [closure]
        assert events_for_date([closure], date(2024, 9, 13)) == []

    def test_datetime_argument_reduced_to_date(self, workshop: CanonicalEvent) -> None:
        assert events_for_date([workshop], _at(2024, 7, 20, 23, 0)) == [workshop]

    def test_explicit_zone(self, workshop: CanonicalEvent) -> None:
        # 14:00-17:00 in Nassau is 18:00-21:00 UTC, still on the 20th
        assert events_for_date([workshop], date(2024, 7, 20), tz=tz.UTC) == [workshop]

    def test_input_order_kept(self) -> None:
        b = _event("b", _at(2024, 7, 20, 15, 0), _at(2024, 7, 20, 16, 0))
        a = _event("a", _at(2024, 7, 20, 9, 0), _at(2024, 7, 20, 10, 0))
        assert events_for_date([b, a], date(2024, 7, 20)) == [b, a]

    def test_matches_overlap_definition(self) -> None:
        events = [
            _event("e1", _at(2024, 7, 19, 23, 0), _at(2024, 7, 20, 0, 30)),
            _event("e2", _at(2024, 7, 20, 0, 0), _at(2024, 7, 20, 0, 0)),
            _event("e3", _at(2024, 7, 20, 12, 0), _at(2024, 7, 22, 12, 0)),
            _event("e4", _at(2024, 7, 21, 0, 0), _at(2024, 7, 21, 1, 0)),
        ]
        for day in (date(2024, 7, 19), date(2024, 7, 20), date(2024, 7, 21), date(2024, 7, 22)):
            day_start = datetime.combine(day, datetime.min.time(), tzinfo=NASSAU)
            day_end = day_start + timedelta(days=1)
            expected = [e for e in events if e.start < day_end and e.end > day_start]
            assert events_for_date(events, day) == expected


# ======================================================================
# upcoming_events
# ======================================================================


class TestUpcomingEvents:
    """Half-open window ``[now, now + W days)``."""

    @pytest.fixture
    def summer(self) -> list[CanonicalEvent]:
        return [
            _event("aug5", _at(2024, 8, 5, 10, 0), _at(2024, 8, 5, 11, 0)),
            _event("jul25", _at(2024, 7, 25, 10, 0), _at(2024, 7, 25, 11, 0)),
            _event("jul20", _at(2024, 7, 20, 14, 0), _at(2024, 7, 20, 17, 0)),
            _event("jul1", _at(2024, 7, 1, 10, 0), _at(2024, 7, 1, 11, 0)),
        ]

    def test_window(self, summer: list[CanonicalEvent]) -> None:
        result = upcoming_events(summer, 14, _at(2024, 7, 15))
        assert [e.id for e in result] == ["jul20", "jul25"]

    def test_zero_window_is_empty(self, summer: list[CanonicalEvent]) -> None:
        assert upcoming_events(summer, 0, _at(2024, 7, 15)) == []

    def test_negative_window_is_empty(self, summer: list[CanonicalEvent]) -> None:
        assert upcoming_events(summer, -3, _at(2024, 7, 15)) == []

    def test_start_boundary_included(self) -> None:
        now = _at(2024, 7, 15, 9, 0)
        event = _event("now", now, now + timedelta(hours=1))
        assert upcoming_events([event], 7, now) == [event]

    def test_end_boundary_excluded(self) -> None:
        now = _at(2024, 7, 15, 9, 0)
        event = _event("edge", now + timedelta(days=7), now + timedelta(days=7, hours=1))
        assert upcoming_events([event], 7, now) == []

    def test_already_started_excluded(self) -> None:
        now = _at(2024, 7, 15, 9, 0)
        event = _event("running", now - timedelta(minutes=30), now + timedelta(hours=1))
        assert upcoming_events([event], 7, now) == []

    def test_naive_now_read_in_default_zone(self, summer: list[CanonicalEvent]) -> None:
        result = upcoming_events(summer, 14, datetime(2024, 7, 15))
        assert [e.id for e in result] == ["jul20", "jul25"]

    def test_naive_now_read_in_explicit_zone(self) -> None:
        utc_event = _event("utc", datetime(2024, 7, 15, 2, 0, tzinfo=tz.UTC), datetime(2024, 7, 15, 3, 0, tzinfo=tz.UTC))
        # 01:00 UTC, not 01:00 in Nassau (05:00 UTC)
        assert upcoming_events([utc_event], 1, datetime(2024, 7, 15, 1, 0), tz=tz.UTC) == [utc_event]
        assert upcoming_events([utc_event], 1, datetime(2024, 7, 15, 1, 0), tz=NASSAU) == []

    def test_naive_now_read_in_event_zone(self) -> None:
        utc_event = _event("utc", datetime(2024, 7, 15, 2, 0, tzinfo=tz.UTC), datetime(2024, 7, 15, 3, 0, tzinfo=tz.UTC))
        assert upcoming_events([utc_event], 1, datetime(2024, 7, 15, 1, 0)) == [utc_event]

    def test_ties_broken_by_priority_then_title(self) -> None:
        start = _at(2024, 7, 16, 10, 0)
        end = start + timedelta(hours=1)
        events = [
            _event("n2", start, end, title="Zumba"),
            _event("n1", start, end, title="Aerobics"),
            _event("u", start, end, title="Midterm", priority=Priority.URGENT),
            _event("h", start, end, title="Essay", priority=Priority.HIGH),
        ]
        result = upcoming_events(events, 7, _at(2024, 7, 15))
        assert [e.id for e in result] == ["u", "h", "n1", "n2"]

    def test_idempotent_and_input_untouched(self, summer: list[CanonicalEvent]) -> None:
        before = [e.id for e in summer]
        first = upcoming_events(summer, 30, _at(2024, 7, 15))
        second = upcoming_events(summer, 30, _at(2024, 7, 15))
        assert first == second
        assert [e.id for e in summer] == before

    def test_results_sorted_by_start(self, summer: list[CanonicalEvent]) -> None:
        result = upcoming_events(summer, 60, _at(2024, 6, 30))
        starts = [e.start for e in result]
        assert starts == sorted(starts)


# ======================================================================
# Range and attribute queries
# ======================================================================


class TestOtherQueries:
    @pytest.fixture
    def events(self) -> list[CanonicalEvent]:
        return [
            _event("exam", _at(2024, 7, 16, 9, 0), _at(2024, 7, 16, 12, 0), event_type=EventType.EXAM, priority=Priority.URGENT),
            _event("storm", _at(2024, 7, 18), _at(2024, 7, 19), is_all_day=True, event_type=EventType.WEATHER, weather_dependent=True),
            _event("fest", _at(2024, 7, 10, 10, 0), _at(2024, 7, 10, 18, 0), event_type=EventType.CULTURAL, weather_dependent=True),
        ]

    def test_events_in_range(self, events: list[CanonicalEvent]) -> None:
        result = events_in_range(events, _at(2024, 7, 15), _at(2024, 7, 22))
        assert [e.id for e in result] == ["exam", "storm"]

    def test_events_by_type(self, events: list[CanonicalEvent]) -> None:
        assert [e.id for e in events_by_type(events, "exam")] == ["exam"]

    def test_events_by_priority(self, events: list[CanonicalEvent]) -> None:
        assert [e.id for e in events_by_priority(events, Priority.NORMAL)] == ["storm", "fest"]

    def test_weather_dependent(self, events: list[CanonicalEvent]) -> None:
        assert [e.id for e in weather_dependent_events(events)] == ["storm", "fest"]

    def test_count_by_type(self, events: list[CanonicalEvent]) -> None:
        counts = count_by_type(events)
        assert counts["exam"] == 1
        assert counts["weather"] == 1
        assert counts["personal"] == 0
        assert sum(counts.values()) == len(events)
