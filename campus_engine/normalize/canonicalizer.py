"""Turn heterogeneous raw event records into :class:`CanonicalEvent` objects.

Records are processed one at a time: a record that cannot be interpreted is
skipped, logged and recorded as a :class:`Diagnostic`, and the rest of the
batch carries on.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Any, Iterable, Mapping, Optional

from campus_engine.data.models import CanonicalEvent, Diagnostic
from campus_engine.data.profiles import (
    DEFAULT_PROFILES,
    PRIORITY_ALIASES,
    SOURCE_DEFAULT_TYPES,
    EventTypeProfile,
    lookup_profile,
)
from campus_engine.data.types import Priority, SourceKind
from campus_engine.errors import MalformedRecordError
from campus_engine.normalize.dates import (
    get_timezone,
    is_all_day_text,
    parse_date_field,
    parse_datetime,
    parse_duration,
    parse_time_of_day,
    start_of_day,
)
from campus_engine.query.calendar import chronological_key

logger = logging.getLogger(__name__)

DEFAULT_EVENT_LENGTH = timedelta(hours=1)

_TRUE_STRINGS = {"true", "yes", "1", "y"}


# ------------------------------------------------------------------
# Raw field helpers
# ------------------------------------------------------------------


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among *keys*."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def _flag(raw: Mapping[str, Any], *keys: str, default: bool = False) -> bool:
    value = _first(raw, *keys)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _optional_int(raw: Mapping[str, Any], *keys: str) -> Optional[int]:
    value = _first(raw, *keys)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MalformedRecordError(f"{keys[0]} is not an integer: {value!r}") from None


def _string_list(value: Any) -> list[str]:
    """Accept a list or a ``;``-separated string."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(";") if part.strip()]
    return [str(v).strip() for v in value if str(v).strip()]


def stable_event_id(title: str, start: datetime) -> str:
    """Deterministic id for records that arrive without one."""
    base = f"{title.strip().lower()}|{start.isoformat()}"
    return hashlib.sha256(base.encode("utf-8")).hexdigest()[:16]


# ------------------------------------------------------------------
# Canonicalizer
# ------------------------------------------------------------------


class Canonicalizer:
    """Normalize raw event batches using an injected profile table.

    Args:
        profiles: Raw type -> :class:`EventTypeProfile` table.
        timezone: Institutional time zone (IANA name or tzinfo).  Date-only
            values span the calendar day in this zone.

    Attributes:
        diagnostics: Every record skipped by this instance, in order.
    """

    def __init__(
        self,
        profiles: Mapping[str, EventTypeProfile] = DEFAULT_PROFILES,
        timezone: str | tzinfo | None = None,
    ) -> None:
        self.profiles = profiles
        self.zone = timezone if isinstance(timezone, tzinfo) else get_timezone(timezone)
        self.diagnostics: list[Diagnostic] = []

    def normalize(
        self,
        raw_records: Iterable[Mapping[str, Any]],
        source_kind: SourceKind | str,
    ) -> list[CanonicalEvent]:
        """Canonicalize one batch of records from a single source.

        Returns:
            The events that could be canonicalized, in input order.
        """
        source_kind = SourceKind(source_kind)
        events: list[CanonicalEvent] = []
        seen_ids: set[str] = set()
        total = 0

        for index, raw in enumerate(raw_records):
            total += 1
            try:
                event = self._canonicalize(raw, source_kind)
                if event.id in seen_ids:
                    raise MalformedRecordError(f"duplicate id {event.id!r}")
            except (ValueError, TypeError, OverflowError) as exc:
                self._report(source_kind, index, raw, str(exc))
                continue
            seen_ids.add(event.id)
            events.append(event)

        logger.info(
            "Normalized %d of %d %s records",
            len(events),
            total,
            source_kind.value,
        )
        return events

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _canonicalize(self, raw: Any, source_kind: SourceKind) -> CanonicalEvent:
        if not isinstance(raw, Mapping):
            raise MalformedRecordError("record is not a mapping")

        title = _text(raw.get("title"))
        if not title:
            raise MalformedRecordError("missing title")

        start, end, all_day = self._resolve_when(raw)
        profile = self._resolve_profile(raw, source_kind)
        priority = self._resolve_priority(raw, profile)

        raw_id = _first(raw, "id")
        local_id = str(raw_id).strip() if raw_id is not None else stable_event_id(title, start)

        instructor = _text(raw.get("instructor")) or None
        course = _text(raw.get("course")) or None

        return CanonicalEvent(
            id=f"{source_kind.value}:{local_id}",
            title=title,
            description=_text(raw.get("description")),
            type=profile.event_type,
            start=start,
            end=end,
            is_all_day=all_day,
            location=_text(raw.get("location")),
            instructor=instructor,
            capacity=_optional_int(raw, "capacity"),
            enrolled=_optional_int(raw, "enrolled", "registered"),
            priority=priority,
            weather_dependent=_flag(raw, "weatherDependent", "weather_dependent"),
            source=source_kind,
            course=course,
            tags=_string_list(raw.get("tags")),
            color=profile.color,
            is_recurring=_flag(raw, "isRecurring", "is_recurring"),
            registration_required=_flag(raw, "registrationRequired", "registration_required"),
        )

    def _resolve_when(self, raw: Mapping[str, Any]) -> tuple[datetime, datetime, bool]:
        """Work out ``(start, end, all_day)`` from whichever fields are present."""
        raw_start = _first(raw, "start")
        raw_date = _first(raw, "date")
        if raw_start is None and raw_date is None:
            raise MalformedRecordError("missing date/time")

        end: Optional[datetime] = None
        if raw_start is not None:
            start, date_only = parse_datetime(raw_start, self.zone)
            raw_end = _first(raw, "end")
            if raw_end is not None:
                end, end_date_only = parse_datetime(raw_end, self.zone)
                if end_date_only:
                    # A bare end date is inclusive
                    end = start_of_day(end.date() + timedelta(days=1), self.zone)
            all_day = date_only
        else:
            when = parse_date_field(raw_date, self.zone)
            start, end, all_day = when.start, when.end, when.all_day

            raw_time = _first(raw, "time")
            if raw_time is not None and all_day and end is None and not is_all_day_text(raw_time):
                start = datetime.combine(
                    start.date(), parse_time_of_day(raw_time), tzinfo=self.zone
                )
                all_day = False

            try:
                delta, duration_all_day = parse_duration(_first(raw, "duration"))
            except (ValueError, OverflowError) as exc:
                logger.warning(
                    "Ignoring duration on %r: %s", raw.get("title"), exc,
                    extra={"record_id": raw.get("id")},
                )
                delta, duration_all_day = None, False
            if duration_all_day:
                all_day = True
            elif delta is not None and end is None and not all_day:
                end = start + delta

        all_day = _flag(raw, "isAllDay", "is_all_day", default=all_day)

        if end is None:
            if all_day:
                end = start_of_day(start.date() + timedelta(days=1), self.zone)
            else:
                end = start + DEFAULT_EVENT_LENGTH
        return start, end, all_day

    def _resolve_profile(
        self, raw: Mapping[str, Any], source_kind: SourceKind
    ) -> EventTypeProfile:
        raw_type = _text(raw.get("type")) or SOURCE_DEFAULT_TYPES[source_kind]
        try:
            return lookup_profile(raw_type, self.profiles)
        except KeyError:
            raise MalformedRecordError(f"unknown event type {raw_type!r}") from None

    def _resolve_priority(
        self, raw: Mapping[str, Any], profile: EventTypeProfile
    ) -> Priority:
        raw_priority = _text(raw.get("priority")).lower()
        if not raw_priority:
            return profile.default_priority
        try:
            return PRIORITY_ALIASES[raw_priority]
        except KeyError:
            raise MalformedRecordError(f"unknown priority {raw_priority!r}") from None

    def _report(
        self, source_kind: SourceKind, index: int, raw: Any, reason: str
    ) -> None:
        record_id = raw.get("id") if isinstance(raw, Mapping) else None
        record_id = str(record_id) if record_id is not None else None
        self.diagnostics.append(
            Diagnostic(
                source=source_kind.value,
                index=index,
                record_id=record_id,
                reason=reason,
            )
        )
        logger.warning(
            "Skipping malformed %s record #%d: %s",
            source_kind.value,
            index,
            reason,
            extra={"source": source_kind.value, "record_index": index, "record_id": record_id},
        )


def normalize(
    raw_records: Iterable[Mapping[str, Any]],
    source_kind: SourceKind | str,
    *,
    profiles: Mapping[str, EventTypeProfile] = DEFAULT_PROFILES,
    timezone: str | tzinfo | None = None,
    diagnostics: list[Diagnostic] | None = None,
) -> list[CanonicalEvent]:
    """Canonicalize a batch with a throwaway :class:`Canonicalizer`.

    Skipped records are appended to *diagnostics* when a list is given.
    """
    canonicalizer = Canonicalizer(profiles=profiles, timezone=timezone)
    events = canonicalizer.normalize(raw_records, source_kind)
    if diagnostics is not None:
        diagnostics.extend(canonicalizer.diagnostics)
    return events


# ------------------------------------------------------------------
# Source aggregation
# ------------------------------------------------------------------


@dataclass
class CalendarSources:
    """Raw collections feeding the merged calendar view."""

    academic_calendar: list[Mapping[str, Any]] = field(default_factory=list)
    personal_events: list[Mapping[str, Any]] = field(default_factory=list)
    cultural_events: list[Mapping[str, Any]] = field(default_factory=list)
    calendar_events: list[Mapping[str, Any]] = field(default_factory=list)

    def batches(self) -> list[tuple[SourceKind, list[Mapping[str, Any]]]]:
        return [
            (SourceKind.ACADEMIC_CALENDAR, self.academic_calendar),
            (SourceKind.PERSONAL, self.personal_events),
            (SourceKind.CULTURAL, self.cultural_events),
            (SourceKind.CALENDAR, self.calendar_events),
        ]


def merge_sources(
    sources: CalendarSources,
    canonicalizer: Canonicalizer | None = None,
) -> list[CanonicalEvent]:
    """Canonicalize every source and return one chronologically ordered list."""
    canonicalizer = canonicalizer or Canonicalizer()
    merged: list[CanonicalEvent] = []
    for source_kind, records in sources.batches():
        merged.extend(canonicalizer.normalize(records, source_kind))
    merged.sort(key=chronological_key)
    return merged
