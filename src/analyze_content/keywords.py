"""Keyword collection and normalization."""

from __future__ import annotations

import re
from typing import Any, Iterable

# Any character other than word characters, whitespace and the comma that
# separates compound entries.
_SPECIAL_CHAR_RE = re.compile(r"[^\w\s,]")


def normalize_keywords(keywords: Iterable[str]) -> list[str]:
    """Normalize keywords into a deduplicated, title-cased list.

    The steps run in this order: drop empty entries, lowercase as the
    dedup key, drop entries with special characters, split comma-joined
    entries, deduplicate, then title-case for display. First-seen order is
    kept.

    >>> normalize_keywords(["AI", "ai", "A.I.!", "machine learning, tech"])
    ['Ai', 'Machine Learning', 'Tech']
    """
    stripped = (k.strip() for k in keywords if isinstance(k, str))
    lowered = (k.lower() for k in stripped if k)
    plain = (k for k in lowered if not _SPECIAL_CHAR_RE.search(k))

    seen: set[str] = set()
    result = []
    for keyword in plain:
        for part in keyword.split(","):
            part = " ".join(part.split())
            if not part or part in seen:
                continue
            seen.add(part)
            result.append(part.title())
    return result


def keywords_from_structured_data(structured_data: Any) -> list[str]:
    """Collect the ``keywords`` values of every JSON-LD object."""
    if structured_data is None:
        return []
    objects = structured_data if isinstance(structured_data, list) else [structured_data]

    keywords: list[str] = []
    for obj in objects:
        if not isinstance(obj, dict):
            continue
        value = obj.get("keywords")
        if isinstance(value, str):
            keywords.extend(value.split(","))
        elif isinstance(value, list):
            keywords.extend(v for v in value if isinstance(v, str))
    return keywords
