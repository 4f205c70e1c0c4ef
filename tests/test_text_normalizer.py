from __future__ import annotations

from services.text_normalizer import clean_formatted_content, clean_plain_text, strip_html, to_plain_text


def test_clean_plain_text_unescapes_entities_and_whitespace() -> None:
    raw = "Tom&rsquo;s &ldquo;big&rdquo;&nbsp;&nbsp;day &amp; night\n"
    assert clean_plain_text(raw) == 'Tom\'s "big" day & night'


def test_clean_plain_text_decodes_angle_brackets_and_numeric_apostrophe() -> None:
    assert clean_plain_text("&lt;b&gt; isn&#39;t &quot;bold&quot;") == '<b> isn\'t "bold"'


def test_clean_plain_text_passes_empty_input_through() -> None:
    assert clean_plain_text(None) is None
    assert clean_plain_text("") == ""


def test_clean_plain_text_is_idempotent() -> None:
    samples = [
        "&amp;amp;lt;tag&amp;gt;",
        "  spaced\t\tout \n text  ",
        "&nbsp;&nbsp;",
        "already clean",
        "&ldquo;Quote&rdquo; &amp;&amp; more",
        "नमस्ते&nbsp;दुनिया",
    ]
    for sample in samples:
        once = clean_plain_text(sample)
        assert clean_plain_text(once) == once


def test_clean_formatted_content_keeps_tags_and_escaped_brackets() -> None:
    raw = "<p>Rock&nbsp;&amp; roll &lt;3</p>\n\n<h2>Next</h2>"
    assert clean_formatted_content(raw) == "<p>Rock & roll &lt;3</p> <h2>Next</h2>"


def test_strip_html_separates_block_text() -> None:
    assert strip_html("<p>first</p><p>second</p>") == "first second"
    assert strip_html(None) == ""


def test_to_plain_text_strips_and_unescapes() -> None:
    assert to_plain_text("<p>Fish &amp; chips</p>") == "Fish & chips"
