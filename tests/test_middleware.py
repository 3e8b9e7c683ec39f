"""Tests for request logging middleware."""

from __future__ import annotations

import logging

import pytest

from carefinder.services.metrics import metrics


@pytest.mark.asyncio
async def test_response_time_header_on_success(client):
    resp = await client.get("/api/health")
    assert "X-Response-Time-Ms" in resp.headers
    float(resp.headers["X-Response-Time-Ms"])


@pytest.mark.asyncio
async def test_response_time_header_on_404(client):
    resp = await client.get("/nonexistent")
    assert resp.status_code == 404
    assert "X-Response-Time-Ms" in resp.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    resp = await client.get("/api/health")
    assert len(resp.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    resp = await client.get("/api/health", headers={"X-Request-ID": "trace-123"})
    assert resp.headers["X-Request-ID"] == "trace-123"


@pytest.mark.asyncio
async def test_search_route_gets_headers(client, use_entities):
    use_entities()
    resp = await client.get("/api/search", params={"q": "grief"})
    assert resp.status_code == 200
    assert "X-Response-Time-Ms" in resp.headers


@pytest.mark.asyncio
async def test_counts_requests(client):
    await client.get("/api/health")
    await client.get("/nonexistent")
    assert metrics.total_requests == 2
    assert metrics.status_codes == {200: 1, 404: 1}


@pytest.mark.asyncio
async def test_query_string_not_logged(client, use_entities, caplog):
    use_entities()
    with caplog.at_level(logging.INFO, logger="carefinder.access"):
        await client.get("/api/search", params={"q": "suicidal thoughts"})
    access = [r.getMessage() for r in caplog.records if r.name == "carefinder.access"]
    assert access
    assert all("suicidal" not in line for line in access)
