from __future__ import annotations

import logging

from services.content_generator import ContentGeneratorService
from services.prompts import Language
from services.results import ArticleDraft, InshortDraft
from services.slugs import (
    EntityKind,
    SlugRepository,
    calculate_reading_time,
    generate_excerpt,
    generate_unique_slug,
    truncate_excerpt,
    truncate_text,
)

logger = logging.getLogger(__name__)


class ArticleDraftService:
    """Assemble unsaved article and Inshort drafts from generated content.

    Drafts carry a slug that was free when probed; the caller writes the
    record and must handle a unique-index conflict by asking for a new draft.
    """

    def __init__(self, generator: ContentGeneratorService, repository: SlugRepository) -> None:
        self._generator = generator
        self._repository = repository

    async def build_translated_article(
        self,
        title: str,
        content: str,
        target_language: Language | str = Language.hindi,
    ) -> ArticleDraft:
        translated = await self._generator.translate_content(title, content, target_language)
        limits = self._generator.limits
        slug = await generate_unique_slug(translated.title, EntityKind.article, self._repository)
        excerpt = truncate_excerpt(translated.excerpt, limits.excerpt_words) or generate_excerpt(
            translated.content, limits.excerpt_words
        )
        if translated.fallback:
            logger.warning("Translation unavailable; draft %s keeps the source text", slug)
        return ArticleDraft(
            title=translated.title,
            slug=slug,
            excerpt=excerpt,
            content=translated.content,
            meta_title=translated.meta_title or truncate_text(translated.title, limits.meta_title_chars),
            meta_description=translated.meta_description
            or truncate_text(excerpt, limits.meta_description_chars),
            keywords=translated.keywords,
            read_time=calculate_reading_time(translated.content),
            language=translated.language,
            fallback=translated.fallback,
        )

    async def build_inshort(
        self,
        article_title: str,
        article_content: str,
        language: Language | str = Language.english,
    ) -> InshortDraft:
        inshort = await self._generator.generate_inshort(article_title, article_content, language)
        seo = await self._generator.generate_inshort_seo(inshort.title, inshort.content, language)
        slug = await generate_unique_slug(inshort.title, EntityKind.inshort, self._repository)
        return InshortDraft(
            title=inshort.title,
            slug=slug,
            content=inshort.content,
            read_time=inshort.read_time,
            language=Language(language),
            seo=seo,
            source_title=article_title,
            fallback=inshort.fallback,
        )
