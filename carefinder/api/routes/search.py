"""GET /api/search: ranked multi-term search across the directory."""

from __future__ import annotations

import asyncio
import logging
import time

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from carefinder.api.dependencies import get_entity_service
from carefinder.api.schemas import ErrorResponse, RateLimitedResponse, SearchResponse
from carefinder.config import settings
from carefinder.services.entity_service import EntityService
from carefinder.services.metrics import metrics
from carefinder.services.rate_limiter import search_rate_limiter
from carefinder.services.request_context import get_client_ip
from carefinder.services.search import paginate, search_records
from carefinder.services.search_text import normalize_query, split_terms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])

SHORT_QUERY_MESSAGE = "Search query must be at least 2 characters"
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


@router.get(
    "/search",
    summary="Search treatments, conditions and resources",
    description=(
        "Split the query on whitespace and return every treatment, condition "
        "and resource containing **all** terms, ranked by relevance: matched "
        "term count, exact name match, brand-name match, then name prefix "
        "matches. Each result carries at most one highlight snippet per "
        "term.\n\n"
        "Queries shorter than 2 characters return an empty result list with "
        "a `message` (status 200). `type` filters the ranked list; `offset` "
        "and `limit` page it, and `totalCount` counts all filtered matches."
    ),
    response_model=SearchResponse,
    response_model_exclude_none=True,
    responses={
        429: {"model": RateLimitedResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Search failed"},
    },
)
async def search(
    response: Response,
    q: str | None = Query(None, description="Free-text query (min 2 characters)"),
    type_: str | None = Query(
        None,
        alias="type",
        description="Only return results of this type: treatment, condition or resource",
    ),
    limit: int = Query(
        settings.search_default_limit,
        gt=0,
        description=f"Page size (capped at {settings.search_max_limit})",
    ),
    offset: int = Query(0, ge=0, description="Number of ranked results to skip"),
    service: EntityService = Depends(get_entity_service),
):
    """Return ranked search results for *q*."""
    start = time.perf_counter()

    # --- rate limit ----------------------------------------------------------
    decision = search_rate_limiter.check(get_client_ip())
    if search_rate_limiter.enabled:
        for hdr, val in decision.headers.items():
            response.headers[hdr] = val
    if not decision.allowed:
        metrics.inc_rate_limited()
        return JSONResponse(
            status_code=429,
            content={
                "error": "Too many requests",
                "message": "You have exceeded the rate limit. Please try again later.",
                "retryAfter": decision.retry_after,
            },
            headers=decision.headers,
        )

    # --- validation ----------------------------------------------------------
    query = normalize_query(q, settings.search_min_query_length)
    if query is None:
        metrics.inc_search_rejected()
        return {"results": [], "message": SHORT_QUERY_MESSAGE}

    terms = split_terms(query)
    limit = min(limit, settings.search_max_limit)

    # --- load + rank ---------------------------------------------------------
    try:
        treatments, conditions, resources = await asyncio.gather(
            service.get_all_treatments(),
            service.get_by_entity_type("condition"),
            service.get_by_entity_type("resource"),
        )
        ranked = search_records(terms, treatments, conditions, resources)
    except Exception:
        load_time = _elapsed_ms(start)
        logger.exception("Search failed after %.2fms", load_time, extra={"load_time_ms": load_time})
        metrics.inc_search_failure()
        return JSONResponse(
            status_code=500,
            content={"error": SEARCH_FAILED_MESSAGE},
            headers=decision.headers if search_rate_limiter.enabled else None,
        )

    page, total = paginate(ranked, type_filter=type_, limit=limit, offset=offset)

    load_time = _elapsed_ms(start)
    slow = load_time > settings.search_slow_query_ms
    metrics.record_search(load_time, total, slow)
    logger.debug("Found %d results (%d on page) in %.2fms", total, len(page), load_time)
    if slow:
        logger.warning(
            "Slow search: %.2fms for %d terms, %d results (threshold %.0fms)",
            load_time,
            len(terms),
            total,
            settings.search_slow_query_ms,
        )

    return {
        "results": [result.to_dict() for result in page],
        "totalCount": total,
        "hasMore": offset + len(page) < total,
        "nextOffset": offset + limit,
        "loadTimeMs": load_time,
    }
