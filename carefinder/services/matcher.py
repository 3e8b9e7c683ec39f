"""Substring term matching over a record's composite haystack."""

from __future__ import annotations

from typing import Iterable

from carefinder.services.records import SearchableRecord
from carefinder.services.search_text import fold, to_search_text


def build_haystack(record: SearchableRecord) -> str:
    """Return the folded text every query term is matched against.

    Includes name, description, slug, category, brand names and the full
    serialized metadata and content maps.
    """
    parts = [
        record.name,
        record.resolved_description or "",
        record.slug,
        record.resolved_category or "",
        " ".join(record.brand_names),
        to_search_text(record.metadata),
        to_search_text(record.content),
    ]
    return fold(" ".join(parts))


def matches_all(haystack: str, terms: Iterable[str]) -> bool:
    """True iff every term is a substring of *haystack* (no word boundaries)."""
    return all(term in haystack for term in terms)


def count_matches(haystack: str, terms: Iterable[str]) -> int:
    return sum(1 for term in terms if term in haystack)
