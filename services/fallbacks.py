"""Deterministic substitutes used whenever the generative oracle path fails.

Every function here derives its result from the request fields alone, so an
operation always returns a complete record even with the oracle offline.
"""
from __future__ import annotations

import html
import re

from services.limits import GenerationLimits, clamp
from services.prompts import Language
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
from services.slugs import ELLIPSIS, calculate_reading_time, generate_excerpt, truncate_text
from services.text_normalizer import clean_formatted_content, clean_plain_text, to_plain_text

GENERIC_TAGS = ("news", "article", "general", "latest", "headlines")
DEFAULT_KEYWORDS = "news, article"
ARTICLE_KEYWORDS = "news, article, breaking news"
DEFAULT_CATEGORY = "National"

MIN_TITLE_SENTENCE_CHARS = 10
TITLE_SNIPPET_CHARS = 80

_SENTENCE_END_RE = re.compile(r"(?<=[.!?।])\s+")
_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")
_PARAGRAPH_RE = re.compile(r"\n\s*\n")


def split_sentences(text: str) -> list[str]:
    return [part.strip() for part in _SENTENCE_END_RE.split(text) if part.strip()]


def first_sentence(text: str) -> str:
    sentences = split_sentences(text)
    if not sentences:
        return ""
    return sentences[0].rstrip(".").strip()


def word_snippet(text: str, limit: int) -> str:
    """Cut at a word boundary and mark the cut, keeping the result within ``limit``."""
    if len(text) <= limit:
        return text
    cut = text[: max(0, limit - len(ELLIPSIS))]
    last_space = cut.rfind(" ")
    if last_space > 0:
        cut = cut[:last_space]
    return cut.rstrip() + ELLIPSIS


def plain_to_html(content: str) -> str:
    """Keep HTML bodies as they are; wrap plain text paragraphs in ``<p>``."""
    if _TAG_RE.search(content):
        return clean_formatted_content(content) or ""
    paragraphs = [" ".join(part.split()) for part in _PARAGRAPH_RE.split(content)]
    return "".join(f"<p>{html.escape(part, quote=False)}</p>" for part in paragraphs if part)


def _title_text(title: str | None, limit: int) -> str:
    return truncate_text(clean_plain_text(title or "") or "", limit)


def quick_read(title: str, content: str, limits: GenerationLimits) -> QuickRead:
    text = to_plain_text(content)
    summary = truncate_text(generate_excerpt(text, limits.excerpt_words), limits.summary_chars)
    headline = _title_text(title, limits.title_chars) or word_snippet(summary, limits.title_chars)
    key_point = first_sentence(text) or summary
    return QuickRead(
        title=headline,
        summary=summary,
        key_points=[word_snippet(key_point, limits.key_point_chars)] if key_point else [],
        read_time=limits.default_quick_read_minutes,
        fallback=True,
    )


def seo_metadata(title: str, content: str, limits: GenerationLimits) -> SEOMetadata:
    text = to_plain_text(content)
    meta_title = _title_text(title, limits.meta_title_chars) or word_snippet(text, limits.meta_title_chars)
    meta_description = truncate_text(text, limits.meta_description_chars)
    return SEOMetadata(
        meta_title=meta_title,
        meta_description=meta_description,
        og_title=meta_title,
        og_description=meta_description,
        keywords=DEFAULT_KEYWORDS,
        fallback=True,
    )


def seo_only(title: str, content: str, limits: GenerationLimits) -> SEOOnly:
    seo = seo_metadata(title, content, limits)
    return SEOOnly(
        meta_title=seo.meta_title,
        meta_description=seo.meta_description or seo.meta_title,
        keywords=DEFAULT_KEYWORDS,
        fallback=True,
    )


def tags() -> TagSet:
    return TagSet(tags=list(GENERIC_TAGS), fallback=True)


def article_title(text: str, limits: GenerationLimits) -> str:
    sentence = first_sentence(text)
    if MIN_TITLE_SENTENCE_CHARS <= len(sentence) <= limits.article_title_chars:
        return sentence
    return word_snippet(text, TITLE_SNIPPET_CHARS)


def news_from_content(content: str, language: Language, limits: GenerationLimits) -> GeneratedArticle:
    text = to_plain_text(content)
    title = article_title(text, limits)
    return GeneratedArticle(
        title=title,
        excerpt=generate_excerpt(text, limits.excerpt_words),
        content=plain_to_html(content.strip()),
        meta_title=word_snippet(title, limits.meta_title_chars),
        meta_description=truncate_text(text, limits.meta_description_chars),
        keywords=ARTICLE_KEYWORDS,
        read_time=clamp(calculate_reading_time(text), limits.article_minutes),
        quick_read=truncate_text(generate_excerpt(text, 20), limits.quick_read_chars),
        tags=list(GENERIC_TAGS),
        category_suggestion=DEFAULT_CATEGORY,
        language=language,
        fallback=True,
    )


def regenerate(
    title: str,
    content: str,
    meta_title: str = "",
    meta_description: str = "",
) -> RegeneratedContent:
    return RegeneratedContent(
        title=title,
        content=content,
        meta_title=meta_title,
        meta_description=meta_description,
        fallback=True,
    )


def translation(title: str, content: str, target_language: Language) -> TranslatedContent:
    return TranslatedContent(
        title=title,
        excerpt="",
        content=content,
        meta_title="",
        meta_description="",
        keywords="",
        language=target_language,
        fallback=True,
    )


def inshort(title: str, content: str, limits: GenerationLimits) -> InshortContent:
    text = to_plain_text(content)
    story = ""
    for sentence in split_sentences(text)[:3]:
        candidate = f"{story} {sentence}".strip()
        if len(candidate) > limits.inshort_content_chars:
            break
        story = candidate
    if not story:
        story = word_snippet(text, limits.inshort_content_chars)
    return InshortContent(
        title=_title_text(title, limits.title_chars) or word_snippet(story, limits.title_chars),
        content=story,
        read_time=limits.default_inshort_minutes,
        fallback=True,
    )


def inshort_seo(title: str, content: str, limits: GenerationLimits) -> SEOMetadata:
    return seo_metadata(title, content, limits)
