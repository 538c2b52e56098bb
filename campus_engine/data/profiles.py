"""Per-type event profiles: canonical type, default priority and style token.

Raw sources use their own vocabulary ("deadline", "class", "festival", ...).
This table is the one place that maps each raw type onto the canonical
:class:`EventType` and decides the priority an event gets when the source
leaves it out.  The canonicalizer receives it as a parameter so callers and
tests can substitute their own table.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from campus_engine.data.types import EventType, Priority, SourceKind


@dataclass(frozen=True)
class EventTypeProfile:
    """How one raw event type is canonicalized."""

    event_type: EventType
    default_priority: Priority
    color: str


DEFAULT_PROFILES: Mapping[str, EventTypeProfile] = MappingProxyType(
    {
        # Canonical types
        "academic": EventTypeProfile(EventType.ACADEMIC, Priority.NORMAL, "text-capas-turquoise"),
        "cultural": EventTypeProfile(EventType.CULTURAL, Priority.NORMAL, "text-capas-coral"),
        "exam": EventTypeProfile(EventType.EXAM, Priority.URGENT, "text-red-600"),
        "assignment": EventTypeProfile(EventType.ASSIGNMENT, Priority.HIGH, "text-capas-gold"),
        "holiday": EventTypeProfile(EventType.HOLIDAY, Priority.NORMAL, "text-capas-coral"),
        "weather": EventTypeProfile(EventType.WEATHER, Priority.NORMAL, "text-orange-600"),
        "emergency": EventTypeProfile(EventType.EMERGENCY, Priority.URGENT, "text-red-700"),
        "personal": EventTypeProfile(EventType.PERSONAL, Priority.NORMAL, "text-capas-ocean"),
        # Academic calendar vocabulary
        "deadline": EventTypeProfile(EventType.ACADEMIC, Priority.HIGH, "text-capas-coral"),
        "event": EventTypeProfile(EventType.CULTURAL, Priority.NORMAL, "text-capas-gold"),
        # Student schedule vocabulary
        "class": EventTypeProfile(EventType.ACADEMIC, Priority.NORMAL, "text-capas-turquoise"),
        "excursion": EventTypeProfile(EventType.ACADEMIC, Priority.NORMAL, "text-capas-ocean"),
        "festival": EventTypeProfile(EventType.CULTURAL, Priority.NORMAL, "text-capas-gold"),
    }
)

# Raw type assumed when a record of this source omits ``type``
SOURCE_DEFAULT_TYPES: Mapping[SourceKind, str] = MappingProxyType(
    {
        SourceKind.ACADEMIC_CALENDAR: "academic",
        SourceKind.PERSONAL: "personal",
        SourceKind.CULTURAL: "cultural",
        SourceKind.CALENDAR: "academic",
    }
)

# Older priority vocabulary folded onto the three canonical levels
PRIORITY_ALIASES: Mapping[str, Priority] = MappingProxyType(
    {
        "low": Priority.NORMAL,
        "medium": Priority.NORMAL,
        "normal": Priority.NORMAL,
        "high": Priority.HIGH,
        "urgent": Priority.URGENT,
    }
)


def lookup_profile(
    raw_type: str,
    profiles: Mapping[str, EventTypeProfile] = DEFAULT_PROFILES,
) -> EventTypeProfile:
    """Return the profile for *raw_type* (case-insensitive).

    Raises:
        KeyError: If the type is not in the table.
    """
    return profiles[raw_type.strip().lower()]
