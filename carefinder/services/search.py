"""Multi-term search across treatments, conditions and resources."""

from __future__ import annotations

import logging
from typing import Iterable

from carefinder.services.matcher import build_haystack, count_matches, matches_all
from carefinder.services.ranker import rank_results
from carefinder.services.records import RecordKind, SearchableRecord, SearchResult
from carefinder.services.snippets import extract_snippets

logger = logging.getLogger(__name__)


def match_record(
    record: SearchableRecord,
    kind: RecordKind,
    terms: list[str],
) -> SearchResult | None:
    """Return a result for *record* if it contains every term, else ``None``."""
    haystack = build_haystack(record)
    if not matches_all(haystack, terms):
        return None

    return SearchResult(
        type=kind,
        id=record.id,
        slug=record.slug,
        name=record.name,
        description=record.resolved_description,
        category=record.resolved_category,
        snippets=extract_snippets(record, terms),
        match_count=count_matches(haystack, terms),
        brand_names=record.brand_names,
    )


def search_records(
    terms: list[str],
    treatments: Iterable[SearchableRecord],
    conditions: Iterable[SearchableRecord],
    resources: Iterable[SearchableRecord],
) -> list[SearchResult]:
    """Match every record against *terms* and return the ranked results.

    Candidates are considered in treatment, condition, resource order, which
    is the order ties fall back to.
    """
    if not terms:
        return []

    candidates: list[SearchResult] = []
    for kind, records in (
        (RecordKind.TREATMENT, treatments),
        (RecordKind.CONDITION, conditions),
        (RecordKind.RESOURCE, resources),
    ):
        for record in records:
            result = match_record(record, kind, terms)
            if result is not None:
                candidates.append(result)

    logger.debug("Matched %d records for %d terms", len(candidates), len(terms))
    return rank_results(candidates, " ".join(terms), terms)


def paginate(
    results: list[SearchResult],
    *,
    type_filter: str | None = None,
    limit: int,
    offset: int = 0,
) -> tuple[list[SearchResult], int]:
    """Filter by type, then slice to ``[offset, offset + limit)``.

    Returns ``(page, total)`` where *total* counts the filtered results
    before slicing.
    """
    if type_filter:
        results = [r for r in results if r.type.value == type_filter]
    return results[offset : offset + limit], len(results)
