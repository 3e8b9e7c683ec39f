"""Read access to directory entities, normalized for search."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from carefinder.db.models import Entity
from carefinder.services.records import SearchableRecord

logger = logging.getLogger(__name__)

TREATMENT_TYPES: tuple[str, ...] = (
    "medication",
    "therapy",
    "interventional",
    "supplement",
    "treatment",
    "alternative",
    "investigational",
)

ACTIVE = "active"


def normalize_entity(row: Entity) -> SearchableRecord:
    """Map an ``entities`` row to the record shape the search expects."""
    return SearchableRecord.from_row(
        {
            "id": row.id,
            "title": row.title,
            "slug": row.slug,
            "description": row.description,
            "metadata": row.metadata_,
            "content": row.content,
        }
    )


class EntityService:
    """Loads active entities.

    Every call opens its own session, so independent loads can be awaited
    concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def _fetch(self, *types: str) -> list[SearchableRecord]:
        stmt = (
            select(Entity)
            .where(Entity.type.in_(types))
            .where(Entity.status == ACTIVE)
            .order_by(Entity.title)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        logger.debug("Loaded %d entities of type %s", len(rows), ",".join(types))
        return [normalize_entity(row) for row in rows]

    async def get_all_treatments(self) -> list[SearchableRecord]:
        return await self._fetch(*TREATMENT_TYPES)

    async def get_by_entity_type(self, entity_type: str) -> list[SearchableRecord]:
        return await self._fetch(entity_type)
