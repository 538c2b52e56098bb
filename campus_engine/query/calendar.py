"""Date-range queries over canonical events.

Every function here is pure: it never mutates its input and returns the same
ordering for the same arguments.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Iterable, Optional

from campus_engine.data.types import PRIORITY_RANK, EventType, Priority
from campus_engine.normalize.dates import DEFAULT_TIMEZONE, get_timezone, localize, start_of_day

if TYPE_CHECKING:
    from campus_engine.data.models import CanonicalEvent


def chronological_key(event: CanonicalEvent) -> tuple:
    """Sort key: start ascending, priority descending, then title and id."""
    return (event.start, -PRIORITY_RANK[event.priority], event.title, event.id)


def _covers_day(event: CanonicalEvent, day: date, zone: Optional[tzinfo]) -> bool:
    if event.is_all_day:
        # Calendar-day membership; the end midnight is exclusive
        first_day = event.start.date()
        last_day = (event.end - timedelta(microseconds=1)).date()
        return first_day <= day <= last_day

    zone = zone or event.start.tzinfo
    day_start = start_of_day(day, zone)
    day_end = start_of_day(day + timedelta(days=1), zone)
    return event.start < day_end and event.end > day_start


def events_for_date(
    events: Iterable[CanonicalEvent],
    day: date | datetime,
    tz: Optional[tzinfo] = None,
) -> list[CanonicalEvent]:
    """Return events whose ``[start, end)`` interval touches *day*.

    Args:
        events: Canonical events.
        day: The calendar day; a datetime is reduced to its date.
        tz: Zone the day boundaries are taken in.  Defaults to each event's
            own zone, which is the institutional zone after canonicalization.

    Returns:
        Matching events in input order.
    """
    if isinstance(day, datetime):
        day = day.date()
    return [event for event in events if _covers_day(event, day, tz)]


def upcoming_events(
    events: Iterable[CanonicalEvent],
    window_days: int,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> list[CanonicalEvent]:
    """Return events starting in ``[now, now + window_days)``.

    Results are sorted by start, ties broken by priority (urgent first), then
    title and id.  A naive *now* is read in *tz*, falling back to the zone of
    the first event and then to the default institutional zone.
    """
    events = list(events)
    if now.tzinfo is None:
        zone = tz or (events[0].start.tzinfo if events else None) or get_timezone(DEFAULT_TIMEZONE)
        now = localize(now, zone)
    horizon = now + timedelta(days=window_days)
    selected = [event for event in events if now <= event.start < horizon]
    return sorted(selected, key=chronological_key)


def events_in_range(
    events: Iterable[CanonicalEvent],
    start: datetime,
    end: datetime,
) -> list[CanonicalEvent]:
    """Events overlapping ``[start, end)``, chronologically ordered.

    Used for week and month grids.
    """
    selected = [event for event in events if event.start < end and event.end > start]
    return sorted(selected, key=chronological_key)


def events_by_type(events: Iterable[CanonicalEvent], event_type: EventType | str) -> list[CanonicalEvent]:
    event_type = EventType(event_type)
    return [event for event in events if event.type == event_type]


def events_by_priority(events: Iterable[CanonicalEvent], priority: Priority | str) -> list[CanonicalEvent]:
    priority = Priority(priority)
    return [event for event in events if event.priority == priority]


def weather_dependent_events(events: Iterable[CanonicalEvent]) -> list[CanonicalEvent]:
    return [event for event in events if event.weather_dependent]


def count_by_type(events: Iterable[CanonicalEvent]) -> dict[str, int]:
    """Number of events per canonical type; every type is present."""
    counts = Counter(event.type.value for event in events)
    return {event_type.value: counts.get(event_type.value, 0) for event_type in EventType}
