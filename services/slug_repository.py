from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import SLUG_TABLES
from services.slugs import EntityKind

logger = logging.getLogger(__name__)


class SqlAlchemySlugRepository:
    """Answer slug-existence probes against the CMS tables."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists_by_slug(
        self,
        entity_kind: EntityKind,
        slug: str,
        exclude_id: str | None = None,
    ) -> bool:
        table = SLUG_TABLES[entity_kind]
        query = select(table.c.id).where(table.c.slug == slug)
        if exclude_id is not None:
            query = query.where(table.c.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        return result.first() is not None

