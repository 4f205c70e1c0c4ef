from __future__ import annotations

import asyncio
import json

import pytest

from services.content_generator import (
    ContentGeneratorService,
    ContentValidationError,
    GenerationRequest,
)
from services.fallbacks import GENERIC_TAGS
from services.oracle import OracleError
from services.prompts import CATEGORY_SUGGESTIONS, Language, OperationKind
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
from tests.conftest import StubOracle

ARTICLE_SOURCE = (
    "The city council approved a new park budget of $2M on Tuesday. "
    "Residents welcomed the decision and construction begins next month."
)


def _run(coro):
    return asyncio.run(coro)


def test_quick_read_from_oracle_reply(make_generator) -> None:
    reply = json.dumps(
        {
            "title": "Park budget &amp; plans",
            "summary": "Council backs park.",
            "keyPoints": ["Budget is $2M, approved Tuesday", "", "Work starts next month"],
            "readTime": 7,
        }
    )
    generator, oracle = make_generator(reply)
    result = _run(generator.generate_quick_read("Park", ARTICLE_SOURCE))

    assert result.fallback is False
    assert result.title == "Park budget & plans"
    assert result.key_points == ["Budget is $2M, approved Tuesday", "Work starts next month"]
    assert result.read_time == 3
    assert len(oracle.prompts) == 1


def test_quick_read_unparseable_read_time_uses_default(make_generator) -> None:
    generator, _ = make_generator('{"title": "T", "summary": "S", "readTime": "soon"}')
    result = _run(generator.generate_quick_read("Park", ARTICLE_SOURCE))
    assert result.read_time == 2
    assert result.key_points


def test_quick_read_fallback_when_offline(offline_generator) -> None:
    result = _run(offline_generator.generate_quick_read("Park budget", ARTICLE_SOURCE))
    assert result.fallback is True
    assert result.title == "Park budget"
    assert result.read_time == 2
    assert result.key_points == ["The city council approved a new park budget of $2M on Tuesday"]


def test_seo_fallback_uses_title_and_content(offline_generator) -> None:
    result = _run(
        offline_generator.generate_seo_metadata(
            "Flood hits region", "<p>Heavy rains caused flooding across the district.</p>"
        )
    )
    assert result == SEOMetadata(
        meta_title="Flood hits region",
        meta_description="Heavy rains caused flooding across the district.",
        og_title="Flood hits region",
        og_description="Heavy rains caused flooding across the district.",
        keywords="news, article",
        fallback=True,
    )


def test_seo_reply_is_bounded_and_open_graph_defaults(make_generator) -> None:
    reply = json.dumps(
        {
            "metaTitle": "M" * 90,
            "metaDescription": "Short description",
            "keywords": ["flood", "Flood", "#rain", "district"],
        }
    )
    generator, _ = make_generator(reply)
    result = _run(generator.generate_seo_metadata("Flood", "Heavy rains"))

    assert result.meta_title == "M" * 60
    assert result.og_title == result.meta_title
    assert result.og_description == "Short description"
    assert result.keywords == "flood, rain, district"


def test_seo_only_accepts_title_alone(make_generator) -> None:
    generator, _ = make_generator('{"metaTitle": "Budget", "metaDescription": "A budget story."}')
    result = _run(generator.generate_seo_only(title="Budget"))
    assert result.meta_title == "Budget"
    assert result.keywords == "news, article"


def test_seo_only_requires_title_or_content(offline_generator) -> None:
    with pytest.raises(ContentValidationError):
        _run(offline_generator.generate_seo_only("  ", ""))


def test_tags_are_shortened_and_padded(make_generator) -> None:
    generator, _ = make_generator('{"tags": ["Politics", "Delhi Assembly Election Results Today"]}')
    result = _run(generator.generate_tags("Delhi votes", "Results are in."))
    assert result == TagSet(tags=["Politics", "Delhi Assembly Election", "news", "article", "general"])


def test_tags_capped_at_ten(make_generator) -> None:
    generator, _ = make_generator(json.dumps({"tags": [f"tag{index}" for index in range(14)]}))
    result = _run(generator.generate_tags("Title", "Body"))
    assert len(result.tags) == 10


def test_tags_fallback_on_oracle_error(make_generator) -> None:
    generator, _ = make_generator(error=OracleError("Oracle request failed: TimeoutError"))
    result = _run(generator.generate_tags("Title", "Body"))
    assert result.tags == list(GENERIC_TAGS)
    assert result.fallback is True


def test_unexpected_oracle_exception_still_falls_back(make_generator, caplog) -> None:
    generator, _ = make_generator(error=KeyError("boom"))
    result = _run(generator.generate_tags("Title", "Body"))
    assert result.fallback is True
    assert "Unexpected oracle error" in caplog.text


def test_full_article_fallback(offline_generator) -> None:
    result = _run(offline_generator.generate_news_from_content(ARTICLE_SOURCE))

    assert result.fallback is True
    assert result.title == "The city council approved a new park budget of $2M on Tuesday"
    assert result.content.startswith("<p>The city council")
    assert result.read_time == 1
    assert result.category_suggestion == "National"
    assert result.tags == list(GENERIC_TAGS)
    assert result.language is Language.english


def test_full_article_rejects_short_content(make_generator) -> None:
    generator, oracle = make_generator('{"title": "X", "content": "Y"}')
    with pytest.raises(ContentValidationError, match="50 characters"):
        _run(generator.generate_news_from_content("Too short."))
    assert oracle.prompts == []


def test_full_article_reply_is_sanitized_and_completed(make_generator) -> None:
    reply = json.dumps(
        {
            "title": "Council backs park",
            "content": "<p>Approved.</p><script>alert(1)</script>",
            "excerpt": " ".join(["word"] * 40),
            "readTime": 45,
            "tags": "parks, budget, city council",
            "categorySuggestion": "sports",
        }
    )
    generator, _ = make_generator(reply)
    result = _run(generator.generate_news_from_content(ARTICLE_SOURCE, "HINDI"))

    assert result.fallback is False
    assert result.content == "<p>Approved.</p>"
    assert len(result.excerpt.split()) == 25
    assert result.read_time == 10
    assert result.tags == ["parks", "budget", "city council"]
    assert result.category_suggestion == "Sports"
    assert result.meta_title == "Council backs park"
    assert result.language is Language.hindi


def test_unknown_category_maps_to_default(make_generator) -> None:
    generator, _ = make_generator('{"title": "T", "content": "<p>C</p>", "categorySuggestion": "Weather"}')
    result = _run(generator.generate_news_from_content(ARTICLE_SOURCE))
    assert result.category_suggestion == "National"


def test_regenerate_checks_feedback_before_calling_oracle(make_generator) -> None:
    generator, oracle = make_generator('{"title": "New"}')
    with pytest.raises(ContentValidationError, match="Feedback"):
        _run(generator.regenerate_with_feedback("Title", "Body", "short"))
    assert oracle.prompts == []


def test_regenerate_partial_reply_keeps_untouched_fields(make_generator) -> None:
    generator, _ = make_generator('{"title": "Sharper title"}')
    result = _run(
        generator.regenerate_with_feedback(
            "Old title", "<p>Body</p>", "Make the headline punchier", meta_title="Old meta"
        )
    )
    assert result.title == "Sharper title"
    assert result.content == "<p>Body</p>"
    assert result.meta_title == "Old meta"
    assert result.fallback is False


def test_regenerate_fallback_returns_input(make_generator) -> None:
    generator, _ = make_generator("not json at all")
    result = _run(
        generator.regenerate_with_feedback(
            "Old title", "<p>Body</p>", "Make the headline punchier", meta_description="Desc"
        )
    )
    assert (result.title, result.content, result.meta_description) == ("Old title", "<p>Body</p>", "Desc")
    assert result.fallback is True


def test_translate_reply(make_generator) -> None:
    reply = json.dumps(
        {
            "title": "पार्क बजट मंज़ूर",
            "content": "<p>परिषद ने बजट पास किया।</p>",
            "keywords": "पार्क, बजट",
        }
    )
    generator, _ = make_generator(reply)
    result = _run(generator.translate_content("Park budget approved", "<p>Council passed it.</p>"))

    assert result.title == "पार्क बजट मंज़ूर"
    assert result.keywords == "पार्क, बजट"
    assert result.language is Language.hindi
    assert result.fallback is False


def test_translate_fallback_passes_source_through(offline_generator) -> None:
    result = _run(offline_generator.translate_content("Title", "<p>Body</p>", Language.english))
    assert (result.title, result.content) == ("Title", "<p>Body</p>")
    assert result.meta_title == ""
    assert result.language is Language.english
    assert result.fallback is True


def test_translate_rejects_unknown_language(offline_generator) -> None:
    with pytest.raises(ContentValidationError, match="Unsupported language"):
        _run(offline_generator.translate_content("Title", "Body", "FRENCH"))


def test_inshort_fallback_takes_leading_sentences(offline_generator) -> None:
    content = "First sentence here. Second one follows! Third is a question? Fourth is dropped."
    result = _run(offline_generator.generate_inshort("Original Title", content))

    assert result.content == "First sentence here. Second one follows! Third is a question?"
    assert result.title == "Original Title"
    assert result.read_time == 1
    assert result.fallback is True


def test_inshort_reply_is_bounded(make_generator) -> None:
    generator, _ = make_generator(json.dumps({"title": "Short", "content": "x" * 400, "readTime": 0}))
    result = _run(generator.generate_inshort("Title", "Body"))
    assert len(result.content) == 300
    assert result.read_time == 1


def test_inshort_seo_fallback(offline_generator) -> None:
    result = _run(offline_generator.generate_inshort_seo("Short title", "Short story."))
    assert result.meta_title == "Short title"
    assert result.fallback is True


@pytest.mark.parametrize(
    "call",
    [
        lambda g: g.generate_quick_read("", "Body"),
        lambda g: g.generate_seo_metadata("Title", "   "),
        lambda g: g.generate_tags("Title", ""),
        lambda g: g.generate_inshort("", "Body"),
        lambda g: g.generate_inshort_seo("Title", ""),
        lambda g: g.translate_content("", ""),
    ],
)
def test_missing_required_input_is_rejected(offline_generator, call) -> None:
    with pytest.raises(ContentValidationError):
        _run(call(offline_generator))


OVERSIZED_REPLY = json.dumps(
    {
        "title": "T" * 200,
        "summary": "S " * 300,
        "keyPoints": [f"point {index} " + "k" * 300 for index in range(9)],
        "readTime": 99,
        "metaTitle": "M" * 200,
        "metaDescription": "D" * 400,
        "openGraphTitle": "O" * 200,
        "openGraphDescription": "G" * 400,
        "keywords": [f"kw{index}" for index in range(30)],
        "tags": [f"tag {index} with extra words" for index in range(30)],
        "excerpt": " ".join(["word"] * 60),
        "content": "<p>" + "body " * 400 + "</p>",
        "quickRead": "q" * 400,
        "categorySuggestion": "Weather",
    }
)


def _within(text: str, limit: int) -> bool:
    return bool(text) and len(text) <= limit


def _assert_bounded(result, limits) -> None:
    if isinstance(result, QuickRead):
        assert _within(result.title, limits.title_chars)
        assert _within(result.summary, limits.summary_chars)
        assert 1 <= len(result.key_points) <= limits.max_key_points
        assert all(_within(point, limits.key_point_chars) for point in result.key_points)
        assert limits.quick_read_minutes[0] <= result.read_time <= limits.quick_read_minutes[1]
    elif isinstance(result, (SEOMetadata, SEOOnly)):
        assert _within(result.meta_title, limits.meta_title_chars)
        assert _within(result.meta_description, limits.meta_description_chars)
        assert 1 <= len(result.keywords.split(", ")) <= limits.max_keywords
        if isinstance(result, SEOMetadata):
            assert _within(result.og_title, limits.meta_title_chars)
            assert _within(result.og_description, limits.meta_description_chars)
    elif isinstance(result, TagSet):
        assert limits.min_tags <= len(result.tags) <= limits.max_tags
        assert all(len(tag.split()) <= limits.tag_words for tag in result.tags)
    elif isinstance(result, GeneratedArticle):
        assert _within(result.title, limits.article_title_chars)
        assert result.content
        assert 1 <= len(result.excerpt.split()) <= limits.excerpt_words
        assert _within(result.meta_title, limits.meta_title_chars)
        assert _within(result.meta_description, limits.meta_description_chars)
        assert limits.article_minutes[0] <= result.read_time <= limits.article_minutes[1]
        assert _within(result.quick_read, limits.quick_read_chars)
        assert 1 <= len(result.tags) <= limits.max_article_tags
        assert result.category_suggestion in CATEGORY_SUGGESTIONS
    elif isinstance(result, (RegeneratedContent, TranslatedContent)):
        assert _within(result.title, limits.article_title_chars)
        assert result.content
        assert len(result.meta_title) <= limits.meta_title_chars
        assert len(result.meta_description) <= limits.meta_description_chars
        if isinstance(result, TranslatedContent):
            assert len(result.excerpt.split()) <= limits.excerpt_words
    elif isinstance(result, InshortContent):
        assert _within(result.title, limits.title_chars)
        assert _within(result.content, limits.inshort_content_chars)
        assert limits.inshort_minutes[0] <= result.read_time <= limits.inshort_minutes[1]
    else:
        raise AssertionError(f"unexpected result {result!r}")


@pytest.mark.parametrize(
    ("oracle", "expect_fallback"),
    [
        (None, True),
        (StubOracle(error=OracleError("down")), True),
        (StubOracle(reply="Sorry, I cannot help with that."), True),
        (StubOracle(reply=OVERSIZED_REPLY), False),
    ],
    ids=["absent", "raising", "not-json", "oversized"],
)
def test_every_operation_returns_bounded_fields(oracle, expect_fallback) -> None:
    generator = ContentGeneratorService(oracle)
    for kind in OperationKind:
        request = GenerationRequest(
            kind=kind, title="Title", content=ARTICLE_SOURCE, feedback="Please tighten it"
        )
        result = _run(generator.generate(request))
        assert result.fallback is expect_fallback, kind
        _assert_bounded(result, generator.limits)


def test_tags_deduplicated_ignoring_case_after_shortening(make_generator) -> None:
    generator, _ = make_generator(
        '{"tags": ["Delhi Police Force Chief", "delhi police force", "Crime"]}'
    )
    result = _run(generator.generate_tags("Delhi", "Police news."))
    assert result.tags == ["Delhi Police Force", "Crime", "news", "article", "general"]


def test_markup_without_text_is_rejected(make_generator) -> None:
    generator, oracle = make_generator('{"title": "X", "content": "Y"}')
    with pytest.raises(ContentValidationError, match="50 characters"):
        _run(generator.generate_news_from_content("<p></p>" * 10))
    with pytest.raises(ContentValidationError):
        _run(generator.generate_inshort("Title", "<p> </p><br/>"))
    with pytest.raises(ContentValidationError):
        _run(generator.translate_content("<b></b>", "<p></p>"))
    assert oracle.prompts == []


def test_generate_dispatches_by_kind(offline_generator) -> None:
    result = _run(
        offline_generator.generate(GenerationRequest(kind=OperationKind.tags, title="T", content="C"))
    )
    assert isinstance(result, TagSet)


def test_degraded_flag(offline_generator, make_generator) -> None:
    generator, _ = make_generator("{}")
    assert offline_generator.degraded is True
    assert generator.degraded is False
