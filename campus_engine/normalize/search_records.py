"""Assemble the cross-domain search corpus.

Each raw collection is tagged with its ``searchType`` exactly once, here.
The returned list is in relevance order: programs, faculty, news, events,
alumni, then pages, each in source order.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from campus_engine.data.models import (
    AlumniResult,
    Diagnostic,
    EventResult,
    FacultyResult,
    NewsResult,
    PageResult,
    ProgramResult,
    SearchRecord,
    SearchResult,
)
from campus_engine.data.types import SearchType
from campus_engine.utils.slug import slugify

logger = logging.getLogger(__name__)

_VARIANTS: dict[SearchType, type[SearchRecord]] = {
    SearchType.PROGRAM: ProgramResult,
    SearchType.FACULTY: FacultyResult,
    SearchType.NEWS: NewsResult,
    SearchType.EVENT: EventResult,
    SearchType.ALUMNI: AlumniResult,
    SearchType.PAGE: PageResult,
}

# Corpus file keys per type; the first is canonical
CORPUS_KEYS: dict[SearchType, tuple[str, ...]] = {
    SearchType.PROGRAM: ("programs",),
    SearchType.FACULTY: ("faculty",),
    SearchType.NEWS: ("news", "newsArticles"),
    SearchType.EVENT: ("events", "upcomingEvents"),
    SearchType.ALUMNI: ("alumni",),
    SearchType.PAGE: ("pages",),
}


def _tag(raw: Mapping[str, Any], search_type: SearchType) -> dict[str, Any]:
    record = dict(raw)
    # Source "type" fields describe the record itself, never the search type
    record.pop("searchType", None)
    record.pop("search_type", None)
    record["search_type"] = search_type.value
    if search_type is SearchType.PROGRAM and not record.get("slug") and record.get("title"):
        record["slug"] = slugify(str(record["title"]))
    return record


def tag_records(
    raw_records: Iterable[Mapping[str, Any]],
    search_type: SearchType | str,
    diagnostics: Optional[list[Diagnostic]] = None,
) -> list[SearchResult]:
    """Validate one raw collection as the given result variant."""
    search_type = SearchType(search_type)
    model = _VARIANTS[search_type]
    results: list[SearchResult] = []
    for index, raw in enumerate(raw_records):
        try:
            if not isinstance(raw, Mapping):
                raise ValueError("record is not a mapping")
            results.append(model.model_validate(_tag(raw, search_type)))
        except ValueError as exc:
            if isinstance(exc, ValidationError):
                reason = f"{exc.error_count()} invalid field(s)"
            else:
                reason = str(exc)
            record_id = raw.get("id") if isinstance(raw, Mapping) else None
            record_id = str(record_id) if record_id is not None else None
            logger.warning(
                "Skipping malformed %s search record #%d: %s",
                search_type.value,
                index,
                reason,
                extra={"source": search_type.value, "record_index": index, "record_id": record_id},
            )
            if diagnostics is not None:
                diagnostics.append(
                    Diagnostic(source=search_type.value, index=index, record_id=record_id, reason=reason)
                )
    return results


def build_search_corpus(
    *,
    programs: Iterable[Mapping[str, Any]] = (),
    faculty: Iterable[Mapping[str, Any]] = (),
    news: Iterable[Mapping[str, Any]] = (),
    events: Iterable[Mapping[str, Any]] = (),
    alumni: Iterable[Mapping[str, Any]] = (),
    pages: Iterable[Mapping[str, Any]] = (),
    diagnostics: Optional[list[Diagnostic]] = None,
) -> list[SearchResult]:
    """Tag and concatenate every collection into one relevance-ordered corpus."""
    collections = {
        SearchType.PROGRAM: programs,
        SearchType.FACULTY: faculty,
        SearchType.NEWS: news,
        SearchType.EVENT: events,
        SearchType.ALUMNI: alumni,
        SearchType.PAGE: pages,
    }
    corpus: list[SearchResult] = []
    for search_type, records in collections.items():
        corpus.extend(tag_records(records, search_type, diagnostics))
    logger.info("Search corpus holds %d records", len(corpus))
    return corpus


def corpus_from_mapping(
    data: Mapping[str, Any],
    diagnostics: Optional[list[Diagnostic]] = None,
) -> list[SearchResult]:
    """Build the corpus from a loaded corpus document (e.g. a JSON file)."""
    kwargs: dict[str, Any] = {}
    for search_type, keys in CORPUS_KEYS.items():
        records: list[Any] = []
        for key in keys:
            value = data.get(key)
            if isinstance(value, list):
                records.extend(value)
        kwargs[keys[0]] = records
    return build_search_corpus(diagnostics=diagnostics, **kwargs)
