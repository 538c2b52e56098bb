"""Capacity-based seat availability, shared by courses and events."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from campus_engine.data.types import AvailabilityBucket

HIGH_THRESHOLD = 50.0
MEDIUM_THRESHOLD = 20.0


class Availability(BaseModel):
    """Percentage of free seats and its bucket."""

    model_config = ConfigDict(frozen=True)

    percent: float
    bucket: AvailabilityBucket


def classify(percent: float) -> AvailabilityBucket:
    """Map a free-seat percentage onto a bucket.

    ``> 50`` is high, ``20..50`` (inclusive) is medium, below 20 is low.
    """
    if percent > HIGH_THRESHOLD:
        return AvailabilityBucket.HIGH
    if percent >= MEDIUM_THRESHOLD:
        return AvailabilityBucket.MEDIUM
    return AvailabilityBucket.LOW


def availability(capacity: int, enrolled: int) -> Availability:
    """Compute availability for any record with a capacity.

    Over-enrolled records clamp to 0%; a non-positive capacity resolves to
    ``0%`` / low instead of dividing by zero.

    Examples:
        >>> availability(25, 18).percent
        28.0
        >>> availability(0, 0).bucket.value
        'low'
    """
    if capacity <= 0:
        return Availability(percent=0.0, bucket=AvailabilityBucket.LOW)
    percent = 100 * (capacity - enrolled) / capacity
    percent = min(max(percent, 0.0), 100.0)
    return Availability(percent=percent, bucket=classify(percent))
