"""Pydantic response models for OpenAPI documentation."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Structured error returned by non-2xx responses."""

    error: str = Field(..., description="Human-readable, user-safe error message")
    status_code: int | None = Field(None, description="HTTP status code")
    detail: Any | None = Field(
        None, description="Field-level problems (validation errors only)"
    )


class RateLimitedResponse(BaseModel):
    """Body of a 429 response."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Always 'Too many requests'")
    message: str = Field(..., description="Explanation for the caller")
    retry_after: int = Field(
        ..., alias="retryAfter", description="Seconds until a retry may succeed"
    )


# ---------------------------------------------------------------------------
# /health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Liveness check result."""

    ok: bool = Field(..., description="True when the service is up")
    timestamp: str = Field(..., description="Server time (ISO 8601, UTC)")
    version: str = Field(..., description="Service version")
    uptime_seconds: float | None = Field(
        None, description="Seconds since the process started"
    )


# ---------------------------------------------------------------------------
# /api/search
# ---------------------------------------------------------------------------


class SnippetModel(BaseModel):
    """Excerpt showing where one query term matched."""

    term: str = Field(..., description="The query term (lowercase)")
    field: str = Field(
        ..., description="Where it matched: Name, Description, Category or Content"
    )
    snippet: str = Field(
        ..., description="Display text, original casing; always contains the term"
    )


class SearchResultModel(BaseModel):
    """A single matched treatment, condition or resource."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["treatment", "condition", "resource"] = Field(
        ..., description="Which collection the record came from"
    )
    id: str = Field(..., description="Stable record identifier")
    slug: str = Field(..., description="URL-safe identifier for the detail page")
    name: str = Field(..., description="Display title")
    description: str | None = Field(None, description="Short description")
    category: str | None = Field(None, description="Record category")
    snippets: list[SnippetModel] = Field(
        default_factory=list,
        description=(
            "At most one snippet per query term. Terms without a displayable "
            "excerpt are omitted, so this may be shorter than the term list."
        ),
    )
    match_count: int = Field(
        ...,
        alias="matchCount",
        description="Number of query terms found in the record",
    )


class SearchResponse(BaseModel):
    """Ranked search results, or an empty list with a message for short queries."""

    model_config = ConfigDict(populate_by_name=True)

    results: list[SearchResultModel] = Field(
        ..., description="Results in relevance order (all types interleaved)"
    )
    message: str | None = Field(
        None, description="Why no search ran (query too short)"
    )
    total_count: int | None = Field(
        None,
        alias="totalCount",
        description="Matches after the type filter, before offset/limit",
    )
    has_more: bool | None = Field(
        None, alias="hasMore", description="True when more results follow this page"
    )
    next_offset: int | None = Field(
        None, alias="nextOffset", description="Offset of the next page"
    )
    load_time_ms: float | None = Field(
        None, alias="loadTimeMs", description="Server-side handler duration"
    )
