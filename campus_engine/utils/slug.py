"""Program title to URL slug conversion."""

from __future__ import annotations

import re
import unicodedata


def slugify(title: str) -> str:
    """Convert a program title to the URL slug used under ``/programs/``.

    Rules:
        - Lowercase, with accents folded to ASCII
        - Remove apostrophes and periods ("Children's" -> "childrens")
        - Spell out ampersands as "and"
        - Replace any other non-alphanumeric run with a single hyphen
        - Strip leading/trailing hyphens

    Examples:
        >>> slugify("Musical Theatre")
        'musical-theatre'
        >>> slugify("Dance & Movement Studies")
        'dance-and-movement-studies'
        >>> slugify("B.F.A. Children's Theatre")
        'bfa-childrens-theatre'
    """
    s = unicodedata.normalize("NFKD", title)
    s = s.encode("ascii", "ignore").decode("ascii")
    s = s.lower()

    s = s.replace("'", "").replace("’", "")
    s = s.replace(".", "")
    s = s.replace("&", " and ")

    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")
