from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationLimits:
    """Prompt budgets and output bounds shared by every generation operation."""

    # Source text sent for summarizing tasks (quick read, SEO, tags, inshorts).
    max_input_chars: int = 3000
    # Source text sent for rewriting tasks, where the body must survive intact.
    max_source_chars: int = 12000
    min_article_source_chars: int = 50
    min_feedback_chars: int = 10

    title_chars: int = 60
    article_title_chars: int = 100
    summary_chars: int = 200
    key_point_chars: int = 100
    max_key_points: int = 5
    meta_title_chars: int = 60
    meta_description_chars: int = 155
    quick_read_chars: int = 150
    inshort_content_chars: int = 300
    category_chars: int = 40

    max_keywords: int = 10
    min_tags: int = 5
    max_tags: int = 10
    max_article_tags: int = 8
    tag_words: int = 3

    excerpt_words: int = 25

    quick_read_minutes: tuple[int, int] = (1, 3)
    article_minutes: tuple[int, int] = (1, 10)
    inshort_minutes: tuple[int, int] = (1, 2)
    default_quick_read_minutes: int = 2
    default_article_minutes: int = 3
    default_inshort_minutes: int = 1


def clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))
