"""Async and sync HTTP clients for the CareFinder API."""

from __future__ import annotations

from typing import Any

import httpx

from carefinder.api.schemas import HealthResponse, SearchResponse
from carefinder.sdk.exceptions import (
    CareFinderError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from carefinder.sdk.models import RateLimitInfo

# Maps HTTP status codes to exception classes.
_STATUS_MAP: dict[int, type[CareFinderError]] = {
    400: ValidationError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
}


def _build_exception(
    response: httpx.Response,
    rate_limit_info: RateLimitInfo | None,
) -> CareFinderError:
    """Construct the appropriate exception for an error *response*."""
    status_code = response.status_code
    detail = _parse_detail(response)
    if status_code == 429:
        retry_after = response.headers.get("retry-after")
        return RateLimitError(
            status_code,
            detail,
            rate_limit_info,
            int(retry_after) if retry_after and retry_after.isdigit() else None,
        )
    if status_code >= 500:
        return ServerError(status_code, detail)
    return _STATUS_MAP.get(status_code, CareFinderError)(status_code, detail)


def _parse_detail(response: httpx.Response) -> str:
    """Extract the ``error`` message (or ``detail``) from a JSON error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return response.text
    return str(body.get("error") or body.get("detail") or response.text)


def _search_params(
    q: str,
    type: str | None,
    limit: int | None,
    offset: int,
) -> dict[str, Any]:
    params: dict[str, Any] = {"q": q}
    if type is not None:
        params["type"] = type
    if limit is not None:
        params["limit"] = limit
    if offset:
        params["offset"] = offset
    return params


# ---------------------------------------------------------------------------
# Async client
# ---------------------------------------------------------------------------


class AsyncCareFinderClient:
    """Async client for the CareFinder API (backed by ``httpx.AsyncClient``)."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        *,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"base_url": base_url, "timeout": timeout}
        if _transport is not None:
            kwargs["transport"] = _transport
        self._client = httpx.AsyncClient(**kwargs)
        self.last_rate_limit: RateLimitInfo | None = None

    # -- context manager -----------------------------------------------------

    async def __aenter__(self) -> AsyncCareFinderClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # -- internal ------------------------------------------------------------

    def _handle_response(self, response: httpx.Response) -> None:
        self.last_rate_limit = RateLimitInfo.from_headers(response.headers)
        if response.status_code >= 400:
            raise _build_exception(response, self.last_rate_limit)

    # -- public methods ------------------------------------------------------

    async def health(self) -> HealthResponse:
        resp = await self._client.get("/api/health")
        self._handle_response(resp)
        return HealthResponse.model_validate(resp.json())

    async def search(
        self,
        q: str,
        *,
        type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> SearchResponse:
        resp = await self._client.get(
            "/api/search", params=_search_params(q, type, limit, offset)
        )
        self._handle_response(resp)
        return SearchResponse.model_validate(resp.json())


# ---------------------------------------------------------------------------
# Sync client
# ---------------------------------------------------------------------------


class CareFinderClient:
    """Synchronous client for the CareFinder API (backed by ``httpx.Client``)."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        *,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"base_url": base_url, "timeout": timeout}
        if _transport is not None:
            kwargs["transport"] = _transport
        self._client = httpx.Client(**kwargs)
        self.last_rate_limit: RateLimitInfo | None = None

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> CareFinderClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # -- internal ------------------------------------------------------------

    def _handle_response(self, response: httpx.Response) -> None:
        self.last_rate_limit = RateLimitInfo.from_headers(response.headers)
        if response.status_code >= 400:
            raise _build_exception(response, self.last_rate_limit)

    # -- public methods ------------------------------------------------------

    def health(self) -> HealthResponse:
        resp = self._client.get("/api/health")
        self._handle_response(resp)
        return HealthResponse.model_validate(resp.json())

    def search(
        self,
        q: str,
        *,
        type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> SearchResponse:
        resp = self._client.get(
            "/api/search", params=_search_params(q, type, limit, offset)
        )
        self._handle_response(resp)
        return SearchResponse.model_validate(resp.json())
