from __future__ import annotations

import logging
import math
import re
import unicodedata
from enum import Enum
from typing import Protocol

from services.text_normalizer import strip_html

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_WORDS = 25
DEFAULT_WORDS_PER_MINUTE = 200
ELLIPSIS = "..."

_SEPARATOR_RE = re.compile(r"[\s_-]+")
_HASHTAG_RE = re.compile(r"#(\w+)")
_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"\son\w+\s*=\s*(\"[^\"]*\"|'[^']*')", re.IGNORECASE)
_JS_URL_RE = re.compile(r"javascript:", re.IGNORECASE)


class EntityKind(str, Enum):
    article = "article"
    category = "category"
    inshort = "inshort"
    highlight = "highlight"
    epaper = "epaper"


class SlugRepository(Protocol):
    async def exists_by_slug(
        self,
        entity_kind: EntityKind,
        slug: str,
        exclude_id: str | None = None,
    ) -> bool: ...


def _is_slug_char(char: str) -> bool:
    # Letters, digits and combining marks; marks keep Devanagari words intact.
    return unicodedata.category(char)[0] in {"L", "N", "M"} or char.isspace() or char in "-_"


def create_slug(text: str | None) -> str:
    if not text:
        return ""
    lowered = text.lower().strip()
    kept = "".join(char for char in lowered if _is_slug_char(char))
    return _SEPARATOR_RE.sub("-", kept).strip("-")


async def generate_unique_slug(
    text: str,
    entity_kind: EntityKind,
    repository: SlugRepository,
    exclude_id: str | None = None,
) -> str:
    """Return the first free slug among ``base``, ``base-1``, ``base-2``, ...

    The probe is read-only; two concurrent creations deriving the same base can
    still pick the same value, so the caller must rely on the unique index when
    it writes the record.
    """
    base_slug = create_slug(text) or entity_kind.value
    slug = base_slug
    counter = 1
    while await repository.exists_by_slug(entity_kind, slug, exclude_id):
        slug = f"{base_slug}-{counter}"
        counter += 1
    if counter > 1:
        logger.debug("Slug %s taken for %s; using %s", base_slug, entity_kind.value, slug)
    return slug


def _words(text: str) -> list[str]:
    return text.split()


def calculate_reading_time(content: str | None, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    words = len(_words(strip_html(content)))
    return max(1, math.ceil(words / max(1, words_per_minute)))


def generate_excerpt(content: str | None, max_words: int = DEFAULT_EXCERPT_WORDS) -> str:
    text = strip_html(content)
    if not text:
        return ""
    words = _words(text)
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + ELLIPSIS


def validate_excerpt(excerpt: object, max_words: int = DEFAULT_EXCERPT_WORDS) -> bool:
    if not excerpt or not isinstance(excerpt, str):
        return False
    return len(_words(excerpt)) <= max_words


def truncate_excerpt(excerpt: object, max_words: int = DEFAULT_EXCERPT_WORDS) -> str:
    if not excerpt or not isinstance(excerpt, str):
        return ""
    words = _words(excerpt)
    if len(words) <= max_words:
        return excerpt
    if max_words <= 0:
        return ""
    # The ellipsis is glued to the last word so the word count stays bounded.
    return " ".join(words[:max_words]) + ELLIPSIS


def truncate_text(text: str | None, limit: int) -> str:
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip()


def generate_meta_description(content: str | None, max_length: int = 160) -> str:
    text = strip_html(content)
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated + ELLIPSIS


def sanitize_content(content: str | None) -> str:
    if not content:
        return ""
    cleaned = _SCRIPT_RE.sub("", content)
    cleaned = _IFRAME_RE.sub("", cleaned)
    cleaned = _EVENT_HANDLER_RE.sub("", cleaned)
    return _JS_URL_RE.sub("", cleaned)


def extract_hashtags(text: str | None) -> list[str]:
    if not text:
        return []
    return _HASHTAG_RE.findall(text)
