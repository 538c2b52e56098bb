"""Date/time parsing helpers for raw calendar records.

Every helper returns timezone-aware datetimes in the institutional zone and
raises ``ValueError`` for values it cannot interpret, so the caller can turn
the failure into a per-record diagnostic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

from dateutil import parser as duparser
from dateutil import tz as dutz

DEFAULT_TIMEZONE = "America/Nassau"

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# "2024-10-15-19": a run of days inside one month
_DAY_RANGE_RE = re.compile(r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d1>\d{2})-(?P<d2>\d{2})$")
# Any hint of a time component ("14:00", "7 PM", "T09")
_TIME_HINT_RE = re.compile(r"\d:\d|\d\s*[ap]\.?m\b|T\d", re.IGNORECASE)
_DURATION_RE = re.compile(
    r"^(?P<qty>\d+(?:\.\d+)?)\s*(?P<unit>hours?|hrs?|h|minutes?|mins?|m)$",
    re.IGNORECASE,
)
_ALL_DAY_RE = re.compile(r"^all[- ]?day$", re.IGNORECASE)


@dataclass
class ParsedWhen:
    """Interpretation of a raw date field."""

    start: datetime
    end: Optional[datetime]
    all_day: bool


def get_timezone(name: str | None) -> tzinfo:
    """Return the tzinfo for an IANA zone name.

    Raises:
        ValueError: If the zone is unknown.
    """
    zone = dutz.gettz(name or DEFAULT_TIMEZONE)
    if zone is None:
        raise ValueError(f"Unknown time zone: {name!r}")
    return zone


def localize(dt: datetime, zone: tzinfo) -> datetime:
    """Attach *zone* to a naive datetime, or convert an aware one into it."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def start_of_day(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone)


def all_day_bounds(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Truncate an all-day interval to calendar-day boundaries.

    The start moves back to midnight of its day.  The end becomes the
    exclusive midnight closing the last covered day; an end that already sits
    exactly on a later midnight is kept as is.
    """
    zone = start.tzinfo
    day_start = start_of_day(start.date(), zone)
    end_local = end.astimezone(zone) if zone is not None else end
    end_midnight = start_of_day(end_local.date(), zone)
    if end_local == end_midnight and end_midnight > day_start:
        return day_start, end_midnight
    return day_start, end_midnight + timedelta(days=1)


def _is_date_only(text: str) -> bool:
    return _TIME_HINT_RE.search(text) is None


def parse_datetime(value: Any, zone: tzinfo) -> tuple[datetime, bool]:
    """Parse a single timestamp value.

    Returns:
        ``(moment, date_only)`` where *date_only* is True when the value
        carried no time-of-day component.
    """
    if isinstance(value, datetime):
        return localize(value, zone), False
    if isinstance(value, date):
        return start_of_day(value, zone), True
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not a date/time value: {value!r}")

    text = value.strip()
    try:
        if _ISO_DATE_RE.match(text):
            return start_of_day(date.fromisoformat(text), zone), True
        if _is_date_only(text):
            parsed = duparser.parse(text)
            return start_of_day(parsed.date(), zone), True
        return localize(duparser.parse(text), zone), False
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unparsable date {text!r}: {exc}") from exc


def parse_date_field(value: Any, zone: tzinfo) -> ParsedWhen:
    """Parse a calendar ``date`` field, including ``YYYY-MM-DD-DD`` day runs."""
    if isinstance(value, str):
        m = _DAY_RANGE_RE.match(value.strip())
        if m:
            year, month = int(m.group("y")), int(m.group("m"))
            try:
                first = date(year, month, int(m.group("d1")))
                last = date(year, month, int(m.group("d2")))
            except ValueError as exc:
                raise ValueError(f"Unparsable day range {value!r}: {exc}") from exc
            return ParsedWhen(
                start=start_of_day(first, zone),
                end=start_of_day(last + timedelta(days=1), zone),
                all_day=True,
            )

    moment, date_only = parse_datetime(value, zone)
    return ParsedWhen(start=moment, end=None, all_day=date_only)


def parse_time_of_day(value: Any) -> time:
    """Parse ``"14:00"``, ``"7:00 PM"`` or a :class:`datetime.time`."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not a time value: {value!r}")
    try:
        parsed = duparser.parse(value.strip(), default=datetime(2000, 1, 1))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unparsable time {value!r}: {exc}") from exc
    return parsed.time()


def is_all_day_text(value: Any) -> bool:
    """True for ``"All Day"`` / ``"all-day"`` style markers."""
    return isinstance(value, str) and _ALL_DAY_RE.match(value.strip()) is not None


def parse_duration(value: Any) -> tuple[Optional[timedelta], bool]:
    """Parse a human duration such as ``"3 hours"`` or ``"All Day"``.

    Returns:
        ``(delta, all_day)``.  *delta* is None when the value is empty or
        means "all day".

    Raises:
        ValueError: If the value is present but not understood.
    """
    if value is None or value == "":
        return None, False
    if isinstance(value, timedelta):
        return value, False
    if isinstance(value, (int, float)):
        return timedelta(minutes=float(value)), False

    text = str(value).strip()
    if _ALL_DAY_RE.match(text):
        return None, True
    m = _DURATION_RE.match(text)
    if not m:
        raise ValueError(f"Unparsable duration {text!r}")
    qty = float(m.group("qty"))
    if m.group("unit").lower().startswith("h"):
        return timedelta(hours=qty), False
    return timedelta(minutes=qty), False
