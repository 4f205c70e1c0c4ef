from __future__ import annotations

import pytest

from services.content_generator import ContentGeneratorService
from services.slugs import EntityKind


class StubOracle:
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str, *, max_output_chars: int | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply or ""


class StubSlugRepository:
    def __init__(self, taken: dict[str, str | None] | None = None) -> None:
        # slug -> owning record id
        self.taken = taken or {}
        self.probes: list[tuple[EntityKind, str, str | None]] = []

    async def exists_by_slug(
        self,
        entity_kind: EntityKind,
        slug: str,
        exclude_id: str | None = None,
    ) -> bool:
        self.probes.append((entity_kind, slug, exclude_id))
        if slug not in self.taken:
            return False
        return exclude_id is None or self.taken[slug] != exclude_id


@pytest.fixture
def make_generator():
    def _make(reply: str | None = None, error: Exception | None = None):
        oracle = StubOracle(reply=reply, error=error)
        return ContentGeneratorService(oracle), oracle

    return _make


@pytest.fixture
def offline_generator() -> ContentGeneratorService:
    return ContentGeneratorService(None)


@pytest.fixture
def make_repository():
    def _make(*slugs: str, owners: dict[str, str] | None = None) -> StubSlugRepository:
        taken: dict[str, str | None] = {slug: None for slug in slugs}
        taken.update(owners or {})
        return StubSlugRepository(taken)

    return _make
