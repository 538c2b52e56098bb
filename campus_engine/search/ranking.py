"""Cross-type search: matching, filtering and ordering of search results.

The corpus order is the relevance order.  Filters and sorts never invent
results; they only drop or reorder members of their input.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from dateutil import parser as duparser

from campus_engine.data.models import SearchResult
from campus_engine.data.types import SEARCH_TYPE_ORDER, DateRange, ResultSort, SearchType

logger = logging.getLogger(__name__)

EPOCH = date(1970, 1, 1)

ALL = "all"

# Maximum age in days for each recency window
_RANGE_DAYS: dict[DateRange, int] = {
    DateRange.WEEK: 7,
    DateRange.MONTH: 30,
    DateRange.YEAR: 365,
}


# ------------------------------------------------------------------
# Matching
# ------------------------------------------------------------------


def _matches(result: SearchResult, needle: str) -> bool:
    return any(needle in text.lower() for text in result.searchable_text() if text)


def search(
    corpus: Iterable[SearchResult],
    query: str,
    types: Optional[Iterable[SearchType | str]] = None,
) -> list[SearchResult]:
    """Case-insensitive substring search across all result types.

    Args:
        corpus: Canonical search records, in relevance order.
        query: Free-text query; a blank query matches nothing.
        types: Optional subset of ``searchType`` values to search.

    Returns:
        Matching records in corpus order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    allowed = {SearchType(t) for t in types} if types is not None else None
    return [
        result
        for result in corpus
        if (allowed is None or SearchType(result.search_type) in allowed)
        and _matches(result, needle)
    ]


# ------------------------------------------------------------------
# Filters
# ------------------------------------------------------------------


def filter_by_type(results: Iterable[SearchResult], search_type: str) -> list[SearchResult]:
    if search_type == ALL:
        return list(results)
    wanted = SearchType(search_type)
    return [r for r in results if r.search_type == wanted.value]


def _category_values(result: SearchResult) -> list[str]:
    values = [result.category, getattr(result, "department", None), getattr(result, "program", None)]
    return [v for v in values if v]


def filter_by_category(results: Iterable[SearchResult], category: str) -> list[SearchResult]:
    """Keep results whose category, department or program equals *category*."""
    if category == ALL:
        return list(results)
    wanted = category.casefold()
    return [r for r in results if any(v.casefold() == wanted for v in _category_values(r))]


def _parse_day(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    try:
        return duparser.parse(str(value)).date()
    except (ValueError, OverflowError):
        logger.debug("Unparsable result date %r", value)
        return None


def best_date(result: SearchResult) -> date:
    """Most specific date on a result.

    Fallback order: ``publishDate``, ``date``, January 1 of
    ``graduationYear``, then the epoch.
    """
    for value in (getattr(result, "publish_date", None), result.date):
        parsed = _parse_day(value)
        if parsed is not None:
            return parsed
    year = getattr(result, "graduation_year", None)
    if year:
        try:
            return date(int(year), 1, 1)
        except ValueError:
            pass
    return EPOCH


def filter_by_date_range(
    results: Iterable[SearchResult],
    date_range: DateRange | str,
    now: Optional[datetime] = None,
) -> list[SearchResult]:
    """Keep results no older than the window; future-dated results are kept."""
    date_range = DateRange(date_range)
    if date_range is DateRange.ALL:
        return list(results)
    today = (now or datetime.now()).date()
    limit = _RANGE_DAYS[date_range]
    return [r for r in results if (today - best_date(r)).days <= limit]


# ------------------------------------------------------------------
# Ordering and summaries
# ------------------------------------------------------------------


def sort_results(results: Iterable[SearchResult], sort_by: ResultSort | str) -> list[SearchResult]:
    """Reorder results; every ordering is stable."""
    sort_by = ResultSort(sort_by)
    if sort_by is ResultSort.DATE:
        return sorted(results, key=best_date, reverse=True)
    if sort_by is ResultSort.ALPHABETICAL:
        return sorted(results, key=lambda r: r.display_title.casefold())
    return list(results)


def type_counts(results: Sequence[SearchResult]) -> dict[str, int]:
    """Number of results per ``searchType``; every type is present."""
    counts = Counter(r.search_type for r in results)
    return {t.value: counts.get(t.value, 0) for t in SEARCH_TYPE_ORDER}


def result_categories(results: Iterable[SearchResult]) -> list[str]:
    """Distinct category labels (category, department or program), first-seen order."""
    seen: dict[str, None] = {}
    for result in results:
        values = _category_values(result)
        if values:
            seen.setdefault(values[0], None)
    return list(seen)
