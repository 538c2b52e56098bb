"""Build :class:`Course` objects from catalog records.

Catalog records come either from JSON (nested ``schedule``) or from a CSV
export (flat ``days``/``time``/``location`` columns with ``;``-separated
lists).  Invalid records are skipped with a diagnostic.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from campus_engine.data.models import Course, Diagnostic

logger = logging.getLogger(__name__)

SOURCE_NAME = "course_catalog"

_LIST_FIELDS = ("tags", "prerequisites")


def _split(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(";") if part.strip()]
    return [str(v).strip() for v in value]


def _prepare(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Reshape a flat or nested catalog record into model input."""
    record = {k: v for k, v in raw.items() if v is not None and v != ""}

    schedule = record.get("schedule")
    if not isinstance(schedule, Mapping):
        schedule = {
            "days": record.pop("days", []),
            "time": record.pop("time", ""),
            "location": record.pop("location", ""),
        }
    else:
        schedule = dict(schedule)
    schedule["days"] = _split(schedule.get("days"))
    record["schedule"] = schedule

    for name in _LIST_FIELDS:
        if name in record:
            record[name] = _split(record[name])

    if "id" not in record and "code" in record:
        record["id"] = record["code"]
    return record


def normalize_courses(
    raw_records: Iterable[Mapping[str, Any]],
    diagnostics: list[Diagnostic] | None = None,
) -> list[Course]:
    """Validate catalog records into courses, skipping the invalid ones."""
    courses: list[Course] = []
    seen_ids: set[str] = set()

    for index, raw in enumerate(raw_records):
        record_id = (raw.get("id") or raw.get("code")) if isinstance(raw, Mapping) else None
        try:
            if not isinstance(raw, Mapping):
                raise ValueError("record is not a mapping")
            course = Course.model_validate(_prepare(raw))
            if course.id in seen_ids:
                raise ValueError(f"duplicate id {course.id!r}")
        except ValidationError as exc:
            _report(index, record_id, f"{exc.error_count()} invalid field(s): {_fields(exc)}", diagnostics)
            continue
        except (ValueError, TypeError) as exc:
            _report(index, record_id, str(exc), diagnostics)
            continue
        seen_ids.add(course.id)
        courses.append(course)

    logger.info("Loaded %d courses", len(courses))
    return courses


def _fields(exc: ValidationError) -> str:
    return ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())


def _report(
    index: int,
    record_id: Any,
    reason: str,
    diagnostics: list[Diagnostic] | None,
) -> None:
    record_id = str(record_id) if record_id is not None else None
    logger.warning(
        "Skipping malformed course record #%d: %s",
        index,
        reason,
        extra={"source": SOURCE_NAME, "record_index": index, "record_id": record_id},
    )
    if diagnostics is not None:
        diagnostics.append(
            Diagnostic(source=SOURCE_NAME, index=index, record_id=record_id, reason=reason)
        )
