"""Text normalization shared by matching, snippet extraction and ranking.

Comparisons always go through :func:`fold`; strings shown to users keep
their original casing.
"""

from __future__ import annotations

import json
import re
from typing import Any

MIN_QUERY_LENGTH = 2

_WHITESPACE_RE = re.compile(r"\s+")


def fold(text: str | None) -> str:
    """Case-fold *text* for comparison. ``None`` folds to ``""``."""
    return (text or "").lower()


def clean_whitespace(text: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def to_search_text(value: Any) -> str:
    """Serialize an open JSON subtree to compact JSON text for matching."""
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def normalize_query(raw: str | None, min_length: int = MIN_QUERY_LENGTH) -> str | None:
    """Trim and lowercase *raw*; ``None`` when shorter than *min_length*."""
    query = fold((raw or "").strip())
    if len(query) < min_length:
        return None
    return query


def split_terms(query: str) -> list[str]:
    """Split a normalized query into whitespace-separated terms (duplicates kept)."""
    return [term for term in _WHITESPACE_RE.split(fold(query)) if term]
