from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from services.prompts import Language


class _Record:
    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True)
class QuickRead(_Record):
    title: str
    summary: str
    key_points: list[str]
    read_time: int
    fallback: bool = False


@dataclass(frozen=True)
class SEOMetadata(_Record):
    meta_title: str
    meta_description: str
    og_title: str
    og_description: str
    keywords: str
    fallback: bool = False


@dataclass(frozen=True)
class SEOOnly(_Record):
    meta_title: str
    meta_description: str
    keywords: str
    fallback: bool = False


@dataclass(frozen=True)
class TagSet(_Record):
    tags: list[str]
    fallback: bool = False


@dataclass(frozen=True)
class GeneratedArticle(_Record):
    title: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    read_time: int
    quick_read: str
    tags: list[str]
    category_suggestion: str
    language: Language = Language.english
    fallback: bool = False


@dataclass(frozen=True)
class RegeneratedContent(_Record):
    title: str
    content: str
    meta_title: str
    meta_description: str
    fallback: bool = False


@dataclass(frozen=True)
class TranslatedContent(_Record):
    title: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    language: Language = Language.hindi
    fallback: bool = False


@dataclass(frozen=True)
class InshortContent(_Record):
    title: str
    content: str
    read_time: int
    fallback: bool = False


@dataclass(frozen=True)
class ArticleDraft(_Record):
    """Unsaved article fields; the caller persists them with the slug."""

    title: str
    slug: str
    excerpt: str
    content: str
    meta_title: str
    meta_description: str
    keywords: str
    read_time: int
    language: Language
    status: str = "DRAFT"
    fallback: bool = False


@dataclass(frozen=True)
class InshortDraft(_Record):
    title: str
    slug: str
    content: str
    read_time: int
    language: Language
    seo: SEOMetadata
    source_title: str = ""
    fallback: bool = False
