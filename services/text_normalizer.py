from __future__ import annotations

import re

_PLAIN_ENTITIES = {
    "nbsp": " ",
    "rsquo": "'",
    "lsquo": "'",
    "ldquo": '"',
    "rdquo": '"',
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "#039": "'",
    "apos": "'",
}

# Escaped angle brackets stay escaped in HTML bodies so they never become tags.
_FORMATTED_ENTITIES = {
    name: value for name, value in _PLAIN_ENTITIES.items() if name not in {"lt", "gt"}
}

_PLAIN_ENTITY_RE = re.compile("&(" + "|".join(re.escape(name) for name in _PLAIN_ENTITIES) + ");")
_FORMATTED_ENTITY_RE = re.compile(
    "&(" + "|".join(re.escape(name) for name in _FORMATTED_ENTITIES) + ");"
)
_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")


def _unescape_until_stable(text: str, pattern: re.Pattern[str], table: dict[str, str]) -> str:
    # "&amp;amp;" style double escapes need more than one pass.
    while True:
        updated = pattern.sub(lambda match: table[match.group(1)], text)
        updated = _WS_RE.sub(" ", updated).strip()
        if updated == text:
            return updated
        text = updated


def clean_plain_text(text: str | None) -> str | None:
    """Un-escape common HTML entities and collapse whitespace.

    The result is a fixed point: cleaning it again returns it unchanged.
    Empty or ``None`` input is returned as-is.
    """
    if not text:
        return text
    return _unescape_until_stable(text, _PLAIN_ENTITY_RE, _PLAIN_ENTITIES)


def clean_formatted_content(text: str | None) -> str | None:
    """Like :func:`clean_plain_text` but keeps HTML markup renderable."""
    if not text:
        return text
    return _unescape_until_stable(text, _FORMATTED_ENTITY_RE, _FORMATTED_ENTITIES)


def strip_html(text: str | None) -> str:
    if not text:
        return ""
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", text)).strip()


def to_plain_text(text: str | None) -> str:
    """Strip tags and un-escape entities, for prompt input and fallbacks."""
    return clean_plain_text(strip_html(text)) or ""
