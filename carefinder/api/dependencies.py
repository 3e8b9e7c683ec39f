from __future__ import annotations

from carefinder.db.session import async_session
from carefinder.services.entity_service import EntityService

_entity_service = EntityService(async_session)


def get_entity_service() -> EntityService:
    """FastAPI dependency; overridden in tests with an in-memory corpus."""
    return _entity_service
