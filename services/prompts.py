from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from services.limits import GenerationLimits
from services.text_normalizer import to_plain_text

logger = logging.getLogger(__name__)


class Language(str, Enum):
    english = "ENGLISH"
    hindi = "HINDI"

    @property
    def display_name(self) -> str:
        return "Hindi" if self is Language.hindi else "English"


class OperationKind(str, Enum):
    quick_read = "quick_read"
    seo = "seo"
    seo_only = "seo_only"
    tags = "tags"
    full_article = "full_article"
    regenerate = "regenerate"
    translate = "translate"
    inshort = "inshort"
    inshort_seo = "inshort_seo"


@dataclass(frozen=True)
class PromptSpec:
    kind: OperationKind
    prompt: str
    max_output_chars: int


FIDELITY_RULES = """
CRITICAL REQUIREMENTS:
- ONLY use the information provided in the source above
- DO NOT add facts, dates, names, numbers or details that are not in the source
- DO NOT reference other sources or make assumptions
- If the source is incomplete, do not fill in gaps with external knowledge
""".strip()

HTML_RULES = """
For the content field, use HTML suitable for a rich-text editor:
- <p> for paragraphs, <h2>/<h3> for subheadings
- <strong> and <em> for emphasis, <ul>/<li> for lists, <blockquote> for quotes
""".strip()

QUICK_READ_TEMPLATE = """
Create a quick read summary of this news article in {language}.

Title: {title}
Content: {content}

{rules}

Return a single JSON object with exactly these keys:
title: string (catchy, maximum {title_chars} characters)
summary: string (maximum 25 words)
keyPoints: array of 3-{max_key_points} strings (each maximum {key_point_chars} characters)
readTime: integer minutes between {min_minutes} and {max_minutes}

Example:
{{"title": "...", "summary": "...", "keyPoints": ["...", "..."], "readTime": 2}}
""".strip()

SEO_TEMPLATE = """
Generate SEO metadata for this news article in {language}.

Title: {title}
Content: {content}

{rules}

Return a single JSON object with exactly these keys:
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
openGraphTitle: string (maximum {meta_title_chars} characters)
openGraphDescription: string (maximum {meta_description_chars} characters)
keywords: string (comma-separated, maximum {max_keywords} keywords)

Focus on search visibility and social sharing.
""".strip()

SEO_ONLY_TEMPLATE = """
Generate SEO metadata for this news article in {language}.

Title: {title}
Content: {content}

{rules}

Return a single JSON object with exactly these keys:
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
keywords: string (comma-separated, maximum {max_keywords} keywords)
""".strip()

TAGS_TEMPLATE = """
Generate relevant tags for this news article in {language}.

Title: {title}
Content: {content}

{rules}

Each tag is 1-{tag_words} words and names a topic, location, person or theme.
Return a single JSON object with exactly this key:
tags: array of {min_tags}-{max_tags} strings
""".strip()

FULL_ARTICLE_TEMPLATE = """
You are a professional news editor. Write a well-structured news article in {language}
from the source content below.

Content: {content}

{rules}

{html_rules}

Return a single JSON object with exactly these keys:
title: string (maximum {article_title_chars} characters, specific to the content, no placeholders)
excerpt: string (maximum {excerpt_words} words)
content: string (HTML article body)
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
keywords: string (comma-separated, maximum {max_keywords} keywords)
readTime: integer minutes between {min_minutes} and {max_minutes}
quickRead: string (maximum 20 words, for social previews)
tags: string (comma-separated, maximum {max_article_tags} tags)
categorySuggestion: one of {categories}
""".strip()

REGENERATE_TEMPLATE = """
Revise this news article in {language} according to the editor feedback.

Original Title: {title}
Original Content: {content}
Feedback: {feedback}

{rules}

{html_rules}

Return a single JSON object. Include only the keys that change:
title: string (maximum {article_title_chars} characters)
content: string (HTML article body)
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
""".strip()

TRANSLATE_TEMPLATE = """
Translate this news article to {language}. Keep the tone of the original and make it
read naturally, as if it were written in {language}.

Title: {title}
Content: {content}

{rules}
- Translate only; keep every fact exactly as given

{html_rules}

Return a single JSON object with exactly these keys:
title: string
excerpt: string (maximum {excerpt_words} words)
content: string (HTML article body)
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
keywords: string (comma-separated)
""".strip()

INSHORT_TEMPLATE = """
Convert this news article into a short Inshort-style story in {language}.

Original Title: {title}
Original Content: {content}

{rules}

The story captures the key points in 2-3 sentences of simple, clear language and can be
read in under 60 seconds.

Return a single JSON object with exactly these keys:
title: string (maximum {title_chars} characters)
content: string (maximum {inshort_content_chars} characters)
readTime: integer minutes between {min_minutes} and {max_minutes}
""".strip()

INSHORT_SEO_TEMPLATE = """
Generate SEO metadata for this Inshort news story in {language}.

Title: {title}
Content: {content}

{rules}

Return a single JSON object with exactly these keys:
metaTitle: string (maximum {meta_title_chars} characters)
metaDescription: string (maximum {meta_description_chars} characters)
openGraphTitle: string (maximum {meta_title_chars} characters)
openGraphDescription: string (maximum {meta_description_chars} characters)
keywords: string (comma-separated, maximum {max_keywords} keywords)

Optimize for quick news consumption and social media sharing.
""".strip()

CATEGORY_SUGGESTIONS = (
    "National",
    "International",
    "Sports",
    "Technology",
    "Business",
    "Entertainment",
    "Health",
    "Science",
)


def _budget(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    logger.debug("Truncating prompt source from %s to %s chars", len(text), limit)
    return text[:limit].rstrip()


class PromptBuilder:
    """Render one prompt per operation, with the source cut to the configured budget."""

    def __init__(self, limits: GenerationLimits | None = None) -> None:
        self._limits = limits or GenerationLimits()

    def _summary_source(self, content: str) -> str:
        return _budget(to_plain_text(content), self._limits.max_input_chars)

    def _rewrite_source(self, content: str) -> str:
        return _budget(content.strip(), self._limits.max_source_chars)

    def quick_read(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = QUICK_READ_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            title_chars=limits.title_chars,
            max_key_points=limits.max_key_points,
            key_point_chars=limits.key_point_chars,
            min_minutes=limits.quick_read_minutes[0],
            max_minutes=limits.quick_read_minutes[1],
        )
        return PromptSpec(OperationKind.quick_read, prompt, max_output_chars=1200)

    def seo(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = SEO_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
            max_keywords=limits.max_keywords,
        )
        return PromptSpec(OperationKind.seo, prompt, max_output_chars=1000)

    def seo_only(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = SEO_ONLY_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
            max_keywords=limits.max_keywords,
        )
        return PromptSpec(OperationKind.seo_only, prompt, max_output_chars=700)

    def tags(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = TAGS_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            tag_words=limits.tag_words,
            min_tags=limits.min_tags,
            max_tags=limits.max_tags,
        )
        return PromptSpec(OperationKind.tags, prompt, max_output_chars=600)

    def full_article(self, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = FULL_ARTICLE_TEMPLATE.format(
            language=language.display_name,
            content=self._rewrite_source(content),
            rules=FIDELITY_RULES,
            html_rules=HTML_RULES,
            article_title_chars=limits.article_title_chars,
            excerpt_words=limits.excerpt_words,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
            max_keywords=limits.max_keywords,
            min_minutes=limits.article_minutes[0],
            max_minutes=limits.article_minutes[1],
            max_article_tags=limits.max_article_tags,
            categories=", ".join(CATEGORY_SUGGESTIONS),
        )
        return PromptSpec(OperationKind.full_article, prompt, max_output_chars=12000)

    def regenerate(self, title: str, content: str, feedback: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = REGENERATE_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._rewrite_source(content),
            feedback=feedback.strip(),
            rules=FIDELITY_RULES,
            html_rules=HTML_RULES,
            article_title_chars=limits.article_title_chars,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
        )
        return PromptSpec(OperationKind.regenerate, prompt, max_output_chars=12000)

    def translate(self, title: str, content: str, target_language: Language) -> PromptSpec:
        limits = self._limits
        prompt = TRANSLATE_TEMPLATE.format(
            language=target_language.display_name,
            title=title.strip(),
            content=self._rewrite_source(content),
            rules=FIDELITY_RULES,
            html_rules=HTML_RULES,
            excerpt_words=limits.excerpt_words,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
        )
        return PromptSpec(OperationKind.translate, prompt, max_output_chars=16000)

    def inshort(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = INSHORT_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            title_chars=limits.title_chars,
            inshort_content_chars=limits.inshort_content_chars,
            min_minutes=limits.inshort_minutes[0],
            max_minutes=limits.inshort_minutes[1],
        )
        return PromptSpec(OperationKind.inshort, prompt, max_output_chars=800)

    def inshort_seo(self, title: str, content: str, language: Language) -> PromptSpec:
        limits = self._limits
        prompt = INSHORT_SEO_TEMPLATE.format(
            language=language.display_name,
            title=title.strip(),
            content=self._summary_source(content),
            rules=FIDELITY_RULES,
            meta_title_chars=limits.meta_title_chars,
            meta_description_chars=limits.meta_description_chars,
            max_keywords=limits.max_keywords,
        )
        return PromptSpec(OperationKind.inshort_seo, prompt, max_output_chars=1000)
