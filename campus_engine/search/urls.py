"""Fixed URL resolution for search results.

The table is shared by every caller; pages carry their own literal URL.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from campus_engine.data.models import SearchResult
from campus_engine.data.types import SearchType

RESULT_URL_TEMPLATES: Mapping[SearchType, str] = MappingProxyType(
    {
        SearchType.PROGRAM: "/programs/{slug}",
        SearchType.FACULTY: "/community/faculty?id={id}",
        SearchType.NEWS: "/news-events/{id}",
        SearchType.EVENT: "/news-events/{id}",
        SearchType.ALUMNI: "/community/alumni?id={id}",
    }
)


def resolve_url(result: SearchResult) -> str:
    """Return the portal URL for *result* based on its ``searchType``."""
    search_type = SearchType(result.search_type)
    if search_type is SearchType.PAGE:
        return result.url
    template = RESULT_URL_TEMPLATES[search_type]
    return template.format(id=result.id, slug=getattr(result, "slug", ""))
