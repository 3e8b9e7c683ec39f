"""Relevance ordering for matched search results."""

from __future__ import annotations

from carefinder.services.records import RecordKind, SearchResult
from carefinder.services.search_text import fold


def _brand_match(result: SearchResult, query: str, terms: list[str]) -> bool:
    if result.type is not RecordKind.TREATMENT:
        return False
    brands = {fold(brand.strip()) for brand in result.brand_names}
    if query in brands:
        return True
    return any(term in brands for term in terms)


def relevance_key(result: SearchResult, query: str, terms: list[str]) -> tuple:
    """Sort key; ``False`` sorts first, so each flag is "rule not satisfied".

    Rules, each only breaking ties left by the previous ones: more matched
    terms, exact name match, brand-name match, name starts with the query,
    name starts with any term.
    """
    name = fold(result.name.strip())
    return (
        -result.match_count,
        name != query,
        not _brand_match(result, query, terms),
        not name.startswith(query),
        not any(name.startswith(term) for term in terms),
    )


def rank_results(
    results: list[SearchResult],
    query: str,
    terms: list[str],
) -> list[SearchResult]:
    """Return *results* in relevance order.

    *query* is the folded, whitespace-joined query.  The sort is stable, so
    results tied on every rule keep their input order and result types stay
    interleaved.
    """
    return sorted(results, key=lambda r: relevance_key(r, query, terms))
