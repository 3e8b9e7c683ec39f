"""Tests for carefinder.sdk: clients, error mapping and grouping."""

from __future__ import annotations

import httpx
import pytest

from carefinder.api.schemas import HealthResponse, SearchResponse
from carefinder.sdk import (
    AsyncCareFinderClient,
    CareFinderClient,
    CareFinderError,
    NotFoundError,
    RateLimitError,
    RateLimitInfo,
    ServerError,
    ValidationError,
    group_by_type,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_RATE_HEADERS = {
    "x-ratelimit-limit": "60",
    "x-ratelimit-remaining": "59",
    "x-ratelimit-reset": "42",
}

_HEALTH_BODY = {"ok": True, "timestamp": "2026-01-01T00:00:00+00:00", "version": "1.0.0"}


def _result(id: str, type: str, name: str) -> dict:
    return {
        "type": type,
        "id": id,
        "slug": id,
        "name": name,
        "snippets": [{"term": "anxiety", "field": "Name", "snippet": name}],
        "matchCount": 1,
    }


_SEARCH_BODY = {
    "results": [
        _result("t1", "treatment", "Anxiety Toolkit"),
        _result("c1", "condition", "Anxiety"),
        _result("r1", "resource", "Anxiety Workbook"),
        _result("t2", "treatment", "Buspirone for anxiety"),
        _result("c2", "condition", "Social Anxiety Disorder"),
    ],
    "totalCount": 5,
    "hasMore": False,
    "nextOffset": 50,
    "loadTimeMs": 3.2,
}

_SHORT_BODY = {"results": [], "message": "Search query must be at least 2 characters"}


def _json_response(body: dict, status_code: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    hdrs = dict(_RATE_HEADERS)
    if headers:
        hdrs.update(headers)
    return httpx.Response(status_code, json=body, headers=hdrs)


# ---------------------------------------------------------------------------
# RateLimitInfo / grouping
# ---------------------------------------------------------------------------


class TestRateLimitInfo:
    def test_from_headers_present(self):
        info = RateLimitInfo.from_headers(_RATE_HEADERS)
        assert info == RateLimitInfo(limit=60, remaining=59, reset=42)

    def test_from_headers_absent(self):
        assert RateLimitInfo.from_headers({}) is None

    def test_from_headers_partial(self):
        assert RateLimitInfo.from_headers({"x-ratelimit-limit": "60"}) is None


class TestGroupByType:
    def test_stable_partition(self):
        response = SearchResponse.model_validate(_SEARCH_BODY)
        groups = group_by_type(response.results)
        assert [r.id for r in groups["treatment"]] == ["t1", "t2"]
        assert [r.id for r in groups["condition"]] == ["c1", "c2"]
        assert [r.id for r in groups["resource"]] == ["r1"]

    def test_empty_groups_present(self):
        assert group_by_type([]) == {"condition": [], "treatment": [], "resource": []}


# ---------------------------------------------------------------------------
# Async client
# ---------------------------------------------------------------------------


class TestAsyncClient:
    async def test_health(self):
        transport = httpx.MockTransport(lambda req: _json_response(_HEALTH_BODY))
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            result = await c.health()
        assert isinstance(result, HealthResponse)
        assert result.ok is True

    async def test_search_params_and_parsing(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/search"
            assert request.url.params["q"] == "anxiety"
            assert request.url.params["type"] == "condition"
            assert request.url.params["limit"] == "10"
            assert request.url.params["offset"] == "20"
            return _json_response(_SEARCH_BODY)

        transport = httpx.MockTransport(handler)
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            result = await c.search("anxiety", type="condition", limit=10, offset=20)
        assert isinstance(result, SearchResponse)
        assert result.total_count == 5
        assert result.results[1].match_count == 1
        assert c.last_rate_limit.remaining == 59

    async def test_search_defaults_omit_optional_params(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert set(request.url.params.keys()) == {"q"}
            return _json_response(_SEARCH_BODY)

        transport = httpx.MockTransport(handler)
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            await c.search("anxiety")

    async def test_short_query_message(self):
        transport = httpx.MockTransport(lambda req: _json_response(_SHORT_BODY))
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            result = await c.search("a")
        assert result.results == []
        assert "at least 2 characters" in result.message
        assert result.total_count is None

    async def test_server_error(self):
        transport = httpx.MockTransport(
            lambda req: _json_response({"error": "Search failed. Please try again."}, 500)
        )
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            with pytest.raises(ServerError) as exc_info:
                await c.search("anxiety")
        assert exc_info.value.detail == "Search failed. Please try again."

    async def test_rate_limited(self):
        body = {"error": "Too many requests", "message": "slow down", "retryAfter": 17}
        transport = httpx.MockTransport(
            lambda req: _json_response(body, 429, {"retry-after": "17", "x-ratelimit-remaining": "0"})
        )
        async with AsyncCareFinderClient("http://test", _transport=transport) as c:
            with pytest.raises(RateLimitError) as exc_info:
                await c.search("anxiety")
        assert exc_info.value.retry_after == 17
        assert exc_info.value.rate_limit_info.remaining == 0


# ---------------------------------------------------------------------------
# Sync client
# ---------------------------------------------------------------------------


class TestSyncClient:
    def test_search(self):
        transport = httpx.MockTransport(lambda req: _json_response(_SEARCH_BODY))
        with CareFinderClient("http://test", _transport=transport) as c:
            result = c.search("anxiety")
        assert [r.id for r in result.results] == ["t1", "c1", "r1", "t2", "c2"]

    def test_health(self):
        transport = httpx.MockTransport(lambda req: _json_response(_HEALTH_BODY))
        with CareFinderClient("http://test", _transport=transport) as c:
            assert c.health().version == "1.0.0"

    @pytest.mark.parametrize(
        "status, exc_cls",
        [(404, NotFoundError), (422, ValidationError), (400, ValidationError), (503, ServerError), (418, CareFinderError)],
    )
    def test_error_mapping(self, status, exc_cls):
        transport = httpx.MockTransport(
            lambda req: _json_response({"error": "nope", "status_code": status}, status)
        )
        with CareFinderClient("http://test", _transport=transport) as c:
            with pytest.raises(exc_cls) as exc_info:
                c.search("anxiety")
        assert exc_info.value.status_code == status
        assert exc_info.value.detail == "nope"

    def test_non_json_error_body(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(502, text="Bad Gateway"))
        with CareFinderClient("http://test", _transport=transport) as c:
            with pytest.raises(ServerError) as exc_info:
                c.search("anxiety")
        assert exc_info.value.detail == "Bad Gateway"
        assert c.last_rate_limit is None
