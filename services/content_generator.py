from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from services import fallbacks
from services.limits import GenerationLimits, clamp
from services.oracle import GenerativeOracle, OracleError
from services.prompts import CATEGORY_SUGGESTIONS, Language, OperationKind, PromptBuilder, PromptSpec
from services.response_parser import ParseFailure, ResponseSchema, parse_model_response
from services.results import (
    GeneratedArticle,
    InshortContent,
    QuickRead,
    RegeneratedContent,
    SEOMetadata,
    SEOOnly,
    TagSet,
    TranslatedContent,
)
from services.slugs import sanitize_content, truncate_excerpt, truncate_text
from services.text_normalizer import clean_formatted_content, clean_plain_text, to_plain_text

logger = logging.getLogger(__name__)

_MINUTES = (int, float, str)
_TERMS = (str, list)

QUICK_READ_SCHEMA = ResponseSchema(
    required={"title": (str,), "summary": (str,)},
    optional={"keyPoints": (list,), "readTime": _MINUTES},
)
SEO_SCHEMA = ResponseSchema(
    required={"metaTitle": (str,), "metaDescription": (str,)},
    optional={"openGraphTitle": (str,), "openGraphDescription": (str,), "keywords": _TERMS},
)
SEO_ONLY_SCHEMA = ResponseSchema(
    required={"metaTitle": (str,), "metaDescription": (str,)},
    optional={"keywords": _TERMS},
)
TAGS_SCHEMA = ResponseSchema(required={"tags": _TERMS})
FULL_ARTICLE_SCHEMA = ResponseSchema(
    required={"title": (str,), "content": (str,)},
    optional={
        "excerpt": (str,),
        "metaTitle": (str,),
        "metaDescription": (str,),
        "keywords": _TERMS,
        "readTime": _MINUTES,
        "quickRead": (str,),
        "tags": _TERMS,
        "categorySuggestion": (str,),
    },
)
REGENERATE_SCHEMA = ResponseSchema(
    optional={"title": (str,), "content": (str,), "metaTitle": (str,), "metaDescription": (str,)},
)
TRANSLATE_SCHEMA = ResponseSchema(
    optional={
        "title": (str,),
        "excerpt": (str,),
        "content": (str,),
        "metaTitle": (str,),
        "metaDescription": (str,),
        "keywords": _TERMS,
    },
)
INSHORT_SCHEMA = ResponseSchema(
    required={"title": (str,), "content": (str,)},
    optional={"readTime": _MINUTES},
)


class ContentValidationError(ValueError):
    """Raised when caller input is too short or missing for the requested operation."""


@dataclass(frozen=True)
class GenerationRequest:
    kind: OperationKind
    content: str = ""
    title: str = ""
    feedback: str = ""
    language: Language = Language.english
    meta_title: str = ""
    meta_description: str = ""


def _coerce_language(value: Language | str) -> Language:
    try:
        return Language(value)
    except ValueError as exc:
        raise ContentValidationError(f"Unsupported language: {value}") from exc


def _text(payload: dict[str, Any], key: str, limit: int | None = None) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        return ""
    cleaned = clean_plain_text(value) or ""
    return truncate_text(cleaned, limit) if limit else cleaned


def _html(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        return ""
    return clean_formatted_content(sanitize_content(value)) or ""


def _terms(value: Any) -> list[str]:
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, list):
        raw = [item for item in value if isinstance(item, (str, int, float))]
    else:
        return []
    seen: set[str] = set()
    terms: list[str] = []
    for item in raw:
        term = clean_plain_text(str(item).strip().strip("#")) or ""
        if term and term.lower() not in seen:
            seen.add(term.lower())
            terms.append(term)
    return terms


def _points(value: Any) -> list[str]:
    # Key points are sentences, so commas inside them are kept.
    if not isinstance(value, list):
        return []
    points = []
    for item in value:
        if isinstance(item, str):
            cleaned = clean_plain_text(item.strip()) or ""
            if cleaned:
                points.append(cleaned)
    return points


def _keywords(value: Any, limit: int) -> str:
    return ", ".join(_terms(value)[:limit])


def _minutes(value: Any, bounds: tuple[int, int], default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(minutes) or math.isinf(minutes):
        return default
    return clamp(math.ceil(minutes), bounds)


class ContentGeneratorService:
    """Run AI content operations with a deterministic fallback for every failure.

    ``oracle`` is ``None`` when no credential is configured; every operation
    then answers from its fallback. Only :class:`ContentValidationError` is
    raised, for caller input that cannot be worked with.
    """

    def __init__(
        self,
        oracle: GenerativeOracle | None,
        limits: GenerationLimits | None = None,
    ) -> None:
        self._oracle = oracle
        self._limits = limits or GenerationLimits()
        self._prompts = PromptBuilder(self._limits)

    @property
    def limits(self) -> GenerationLimits:
        return self._limits

    @property
    def degraded(self) -> bool:
        return self._oracle is None

    async def _ask(self, spec: PromptSpec, schema: ResponseSchema) -> dict[str, Any] | None:
        if self._oracle is None:
            logger.warning("Generative oracle not configured; using fallback for %s", spec.kind.value)
            return None

        try:
            raw = await self._oracle.complete(spec.prompt, max_output_chars=spec.max_output_chars)
        except OracleError as exc:
            logger.warning("Oracle call failed for %s: %s", spec.kind.value, exc)
            return None
        except Exception:  # noqa: BLE001 - a misbehaving oracle must not break the editorial flow
            logger.exception("Unexpected oracle error for %s", spec.kind.value)
            return None

        outcome = parse_model_response(raw, schema)
        if isinstance(outcome, ParseFailure):
            snippet = " ".join((raw or "").split())[:160]
            logger.warning("Unusable oracle reply for %s (%s): %s", spec.kind.value, outcome.reason, snippet)
            return None
        return outcome.payload

    # Preconditions

    @staticmethod
    def _require(value: str | None, message: str) -> str:
        # Markup with no readable text counts as missing.
        if not to_plain_text(value):
            raise ContentValidationError(message)
        return value

    def _require_any(self, title: str | None, content: str | None, message: str) -> tuple[str, str]:
        title = title or ""
        content = content or ""
        if not to_plain_text(title) and not to_plain_text(content):
            raise ContentValidationError(message)
        return title, content

    # Operations

    async def generate_quick_read(
        self, title: str, content: str, language: Language | str = Language.english
    ) -> QuickRead:
        title = self._require(title, "Title is required.")
        content = self._require(content, "Content is required.")
        language = _coerce_language(language)
        limits = self._limits

        payload = await self._ask(self._prompts.quick_read(title, content, language), QUICK_READ_SCHEMA)
        fallback = fallbacks.quick_read(title, content, limits)
        if payload is None:
            return fallback

        key_points = [
            truncate_text(point, limits.key_point_chars)
            for point in _points(payload.get("keyPoints"))
        ][: limits.max_key_points]
        return QuickRead(
            title=_text(payload, "title", limits.title_chars) or fallback.title,
            summary=_text(payload, "summary", limits.summary_chars) or fallback.summary,
            key_points=key_points or fallback.key_points,
            read_time=_minutes(
                payload.get("readTime"), limits.quick_read_minutes, limits.default_quick_read_minutes
            ),
        )

    async def generate_seo_metadata(
        self, title: str, content: str, language: Language | str = Language.english
    ) -> SEOMetadata:
        title = self._require(title, "Title is required.")
        content = self._require(content, "Content is required.")
        language = _coerce_language(language)
        payload = await self._ask(self._prompts.seo(title, content, language), SEO_SCHEMA)
        return self._seo_from_payload(payload, fallbacks.seo_metadata(title, content, self._limits))

    async def generate_seo_only(
        self, title: str = "", content: str = "", language: Language | str = Language.english
    ) -> SEOOnly:
        title, content = self._require_any(title, content, "Title or content is required.")
        language = _coerce_language(language)
        limits = self._limits

        payload = await self._ask(self._prompts.seo_only(title, content, language), SEO_ONLY_SCHEMA)
        fallback = fallbacks.seo_only(title, content, limits)
        if payload is None:
            return fallback
        return SEOOnly(
            meta_title=_text(payload, "metaTitle", limits.meta_title_chars) or fallback.meta_title,
            meta_description=_text(payload, "metaDescription", limits.meta_description_chars)
            or fallback.meta_description,
            keywords=_keywords(payload.get("keywords"), limits.max_keywords) or fallback.keywords,
        )

    async def generate_tags(
        self, title: str, content: str, language: Language | str = Language.english
    ) -> TagSet:
        title = self._require(title, "Title is required.")
        content = self._require(content, "Content is required.")
        language = _coerce_language(language)

        payload = await self._ask(self._prompts.tags(title, content, language), TAGS_SCHEMA)
        if payload is None:
            return fallbacks.tags()
        tags = self._tag_list(payload.get("tags"), self._limits.max_tags)
        if not tags:
            return fallbacks.tags()
        return TagSet(tags=self._pad_tags(tags))

    async def generate_news_from_content(
        self, content: str, language: Language | str = Language.english
    ) -> GeneratedArticle:
        limits = self._limits
        if len(to_plain_text(content)) < limits.min_article_source_chars:
            raise ContentValidationError(
                f"Content must be at least {limits.min_article_source_chars} characters long."
            )
        language = _coerce_language(language)

        payload = await self._ask(self._prompts.full_article(content, language), FULL_ARTICLE_SCHEMA)
        fallback = fallbacks.news_from_content(content, language, limits)
        if payload is None:
            return fallback

        title = _text(payload, "title", limits.article_title_chars) or fallback.title
        body = _html(payload, "content") or fallback.content
        excerpt = truncate_excerpt(_text(payload, "excerpt"), limits.excerpt_words) or fallback.excerpt
        tags = self._tag_list(payload.get("tags"), limits.max_article_tags) or fallback.tags
        return GeneratedArticle(
            title=title,
            excerpt=excerpt,
            content=body,
            meta_title=_text(payload, "metaTitle", limits.meta_title_chars)
            or truncate_text(title, limits.meta_title_chars),
            meta_description=_text(payload, "metaDescription", limits.meta_description_chars)
            or truncate_text(excerpt, limits.meta_description_chars),
            keywords=_keywords(payload.get("keywords"), limits.max_keywords) or fallback.keywords,
            read_time=_minutes(payload.get("readTime"), limits.article_minutes, fallback.read_time),
            quick_read=_text(payload, "quickRead", limits.quick_read_chars) or fallback.quick_read,
            tags=tags,
            category_suggestion=self._category(payload.get("categorySuggestion")),
            language=language,
        )

    async def regenerate_with_feedback(
        self,
        title: str,
        content: str,
        feedback: str,
        language: Language | str = Language.english,
        meta_title: str = "",
        meta_description: str = "",
    ) -> RegeneratedContent:
        limits = self._limits
        if not feedback or len(feedback.strip()) < limits.min_feedback_chars:
            raise ContentValidationError(
                f"Feedback must be at least {limits.min_feedback_chars} characters long."
            )
        title, content = self._require_any(title, content, "Title or content is required.")
        language = _coerce_language(language)

        payload = await self._ask(
            self._prompts.regenerate(title, content, feedback, language), REGENERATE_SCHEMA
        )
        if payload is None or not any(_text(payload, key) for key in REGENERATE_SCHEMA.optional):
            return fallbacks.regenerate(title, content, meta_title, meta_description)
        return RegeneratedContent(
            title=_text(payload, "title", limits.article_title_chars) or title,
            content=_html(payload, "content") or content,
            meta_title=_text(payload, "metaTitle", limits.meta_title_chars) or meta_title,
            meta_description=_text(payload, "metaDescription", limits.meta_description_chars)
            or meta_description,
        )

    async def translate_content(
        self,
        title: str = "",
        content: str = "",
        target_language: Language | str = Language.hindi,
    ) -> TranslatedContent:
        title, content = self._require_any(title, content, "Title or content is required for translation.")
        target_language = _coerce_language(target_language)
        limits = self._limits

        payload = await self._ask(self._prompts.translate(title, content, target_language), TRANSLATE_SCHEMA)
        if payload is None or not (_text(payload, "title") or _text(payload, "content")):
            return fallbacks.translation(title, content, target_language)
        return TranslatedContent(
            title=_text(payload, "title", limits.article_title_chars) or title,
            excerpt=truncate_excerpt(_text(payload, "excerpt"), limits.excerpt_words),
            content=_html(payload, "content") or content,
            meta_title=_text(payload, "metaTitle", limits.meta_title_chars),
            meta_description=_text(payload, "metaDescription", limits.meta_description_chars),
            keywords=_keywords(payload.get("keywords"), limits.max_keywords),
            language=target_language,
        )

    async def generate_inshort(
        self, title: str, content: str, language: Language | str = Language.english
    ) -> InshortContent:
        title = self._require(title, "Article title is required.")
        content = self._require(content, "Article content is required.")
        language = _coerce_language(language)
        limits = self._limits

        payload = await self._ask(self._prompts.inshort(title, content, language), INSHORT_SCHEMA)
        fallback = fallbacks.inshort(title, content, limits)
        if payload is None:
            return fallback
        return InshortContent(
            title=_text(payload, "title", limits.title_chars) or fallback.title,
            content=_text(payload, "content", limits.inshort_content_chars) or fallback.content,
            read_time=_minutes(
                payload.get("readTime"), limits.inshort_minutes, limits.default_inshort_minutes
            ),
        )

    async def generate_inshort_seo(
        self, title: str, content: str, language: Language | str = Language.english
    ) -> SEOMetadata:
        title = self._require(title, "Inshort title is required.")
        content = self._require(content, "Inshort content is required.")
        language = _coerce_language(language)
        payload = await self._ask(self._prompts.inshort_seo(title, content, language), SEO_SCHEMA)
        return self._seo_from_payload(payload, fallbacks.inshort_seo(title, content, self._limits))

    async def generate(self, request: GenerationRequest) -> Any:
        """Dispatch a :class:`GenerationRequest` to the matching operation."""
        kind = request.kind
        if kind is OperationKind.quick_read:
            return await self.generate_quick_read(request.title, request.content, request.language)
        if kind is OperationKind.seo:
            return await self.generate_seo_metadata(request.title, request.content, request.language)
        if kind is OperationKind.seo_only:
            return await self.generate_seo_only(request.title, request.content, request.language)
        if kind is OperationKind.tags:
            return await self.generate_tags(request.title, request.content, request.language)
        if kind is OperationKind.full_article:
            return await self.generate_news_from_content(request.content, request.language)
        if kind is OperationKind.regenerate:
            return await self.regenerate_with_feedback(
                request.title,
                request.content,
                request.feedback,
                request.language,
                meta_title=request.meta_title,
                meta_description=request.meta_description,
            )
        if kind is OperationKind.translate:
            return await self.translate_content(request.title, request.content, request.language)
        if kind is OperationKind.inshort:
            return await self.generate_inshort(request.title, request.content, request.language)
        if kind is OperationKind.inshort_seo:
            return await self.generate_inshort_seo(request.title, request.content, request.language)
        raise ContentValidationError(f"Unsupported operation: {kind}")

    # Post-processing

    def _seo_from_payload(self, payload: dict[str, Any] | None, fallback: SEOMetadata) -> SEOMetadata:
        if payload is None:
            return fallback
        limits = self._limits
        meta_title = _text(payload, "metaTitle", limits.meta_title_chars) or fallback.meta_title
        meta_description = (
            _text(payload, "metaDescription", limits.meta_description_chars) or fallback.meta_description
        )
        return SEOMetadata(
            meta_title=meta_title,
            meta_description=meta_description,
            og_title=_text(payload, "openGraphTitle", limits.meta_title_chars) or meta_title,
            og_description=_text(payload, "openGraphDescription", limits.meta_description_chars)
            or meta_description,
            keywords=_keywords(payload.get("keywords"), limits.max_keywords) or fallback.keywords,
        )

    def _tag_list(self, value: Any, limit: int) -> list[str]:
        tags: list[str] = []
        seen: set[str] = set()
        for term in _terms(value):
            tag = " ".join(term.split()[: self._limits.tag_words])
            if tag.lower() not in seen:
                seen.add(tag.lower())
                tags.append(tag)
        return tags[:limit]

    def _pad_tags(self, tags: list[str]) -> list[str]:
        padded = list(tags)
        known = {tag.lower() for tag in padded}
        for generic in fallbacks.GENERIC_TAGS:
            if len(padded) >= self._limits.min_tags:
                break
            if generic not in known:
                padded.append(generic)
        return padded

    @staticmethod
    def _category(value: Any) -> str:
        if isinstance(value, str):
            wanted = (clean_plain_text(value) or "").lower()
            for category in CATEGORY_SUGGESTIONS:
                if category.lower() == wanted:
                    return category
        return fallbacks.DEFAULT_CATEGORY
