from __future__ import annotations

from pydantic import BaseModel, Field

from services.slugs import EntityKind


class SlugRequest(BaseModel):
    text: str = Field(min_length=1, max_length=500)
    entity_kind: EntityKind = EntityKind.article
    exclude_id: str | None = Field(default=None, max_length=64)


class SlugResponse(BaseModel):
    slug: str
    base_slug: str
