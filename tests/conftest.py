from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from carefinder.api.dependencies import get_entity_service
from carefinder.api.main import app
from carefinder.services.metrics import metrics
from carefinder.services.rate_limiter import search_rate_limiter


class FakeEntityService:
    """In-memory stand-in for EntityService."""

    def __init__(self, treatments=(), conditions=(), resources=(), error=None):
        self.treatments = list(treatments)
        self.conditions = list(conditions)
        self.resources = list(resources)
        self.error = error
        self.calls: list[str] = []

    async def get_all_treatments(self):
        self.calls.append("treatments")
        if self.error is not None:
            raise self.error
        return list(self.treatments)

    async def get_by_entity_type(self, entity_type):
        self.calls.append(entity_type)
        if self.error is not None:
            raise self.error
        return list({"condition": self.conditions, "resource": self.resources}.get(entity_type, []))


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def use_entities():
    """Install a FakeEntityService for the duration of a test."""

    def _install(**kwargs) -> FakeEntityService:
        service = FakeEntityService(**kwargs)
        app.dependency_overrides[get_entity_service] = lambda: service
        return service

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_state():
    """Reset the rate limiter and metrics between every test."""
    search_rate_limiter.clear()
    metrics.reset()
    yield
    search_rate_limiter.clear()
