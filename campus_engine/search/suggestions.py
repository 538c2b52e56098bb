"""Search-box suggestions for a partial query."""

from __future__ import annotations

from typing import Iterable

from campus_engine.data.models import SearchResult
from campus_engine.data.types import SearchType

COMMON_TERMS = [
    "admissions", "application", "audition", "scholarship", "financial aid",
    "faculty", "staff", "programs", "courses", "events", "news",
    "musical theatre", "dance", "acting", "voice", "music",
    "campus", "facilities", "tours", "calendar", "contact",
]


def get_suggestions(
    corpus: Iterable[SearchResult],
    partial_query: str,
    limit: int = 8,
) -> list[str]:
    """Suggest completions from program titles, faculty names and common terms.

    Suggestions keep first-seen order and are de-duplicated.
    """
    needle = (partial_query or "").strip().lower()
    if not needle:
        return []

    suggestions: dict[str, None] = {}
    for result in corpus:
        if result.search_type == SearchType.PROGRAM.value:
            label = result.title or ""
        elif result.search_type == SearchType.FACULTY.value:
            label = result.full_name
        else:
            continue
        if label and needle in label.lower():
            suggestions.setdefault(label, None)

    for term in COMMON_TERMS:
        if needle in term:
            suggestions.setdefault(term, None)

    return list(suggestions)[:limit]
