from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_slug_repository
from schemas.slugs import SlugRequest, SlugResponse
from services.slugs import SlugRepository, create_slug, generate_unique_slug

router = APIRouter(tags=["slugs"])


@router.post("/slugs", response_model=SlugResponse)
async def preview_slug(
    payload: SlugRequest,
    repository: SlugRepository = Depends(get_slug_repository),
) -> SlugResponse:
    slug = await generate_unique_slug(
        payload.text,
        payload.entity_kind,
        repository,
        exclude_id=payload.exclude_id,
    )
    return SlugResponse(slug=slug, base_slug=create_slug(payload.text))
