from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from services.content_generator import ContentGeneratorService
from services.drafts import ArticleDraftService
from services.slug_repository import SqlAlchemySlugRepository
from services.slugs import SlugRepository


def get_generator(request: Request) -> ContentGeneratorService:
    return request.app.state.generator


async def get_slug_repository(session: AsyncSession = Depends(get_session)) -> SlugRepository:
    return SqlAlchemySlugRepository(session)


def get_draft_service(
    generator: ContentGeneratorService = Depends(get_generator),
    repository: SlugRepository = Depends(get_slug_repository),
) -> ArticleDraftService:
    return ArticleDraftService(generator, repository)
