from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"\A\s*```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"```\s*\Z")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ResponseSchema:
    """Field names mapped to the Python types accepted for each of them."""

    required: dict[str, tuple[type, ...]] = field(default_factory=dict)
    optional: dict[str, tuple[type, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class ParseSuccess:
    payload: dict[str, Any]


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseOutcome = Union[ParseSuccess, ParseFailure]


def strip_code_fences(text: str) -> str:
    # Only the wrapping fence; backticks inside string values are content.
    return _TRAILING_FENCE_RE.sub("", _LEADING_FENCE_RE.sub("", text)).strip()


def extract_json_block(text: str) -> str | None:
    """Return the first balanced ``{...}`` substring, ignoring braces in strings."""
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def remove_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


REPAIR_PASSES = (remove_trailing_commas, collapse_whitespace)


def _load_object(block: str) -> Any:
    try:
        return json.loads(block)
    except json.JSONDecodeError:
        pass
    repaired = block
    for repair in REPAIR_PASSES:
        repaired = repair(repaired)
    return json.loads(repaired)


def _is_blank(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return value is None


def validate_payload(payload: dict[str, Any], schema: ResponseSchema) -> ParseOutcome:
    for name, types in schema.required.items():
        value = payload.get(name)
        if value is None or _is_blank(value):
            return ParseFailure(f"missing required field '{name}'")
        if not isinstance(value, types):
            return ParseFailure(f"field '{name}' has unexpected type {type(value).__name__}")

    accepted = dict(payload)
    for name, types in schema.optional.items():
        if name in accepted and accepted[name] is not None and not isinstance(accepted[name], types):
            logger.debug("Dropping optional field %s of type %s", name, type(accepted[name]).__name__)
            accepted.pop(name)
    return ParseSuccess(accepted)


def parse_model_response(raw: str | None, schema: ResponseSchema) -> ParseOutcome:
    """Extract, repair and validate a JSON object from free-form model output."""
    if not raw or not raw.strip():
        return ParseFailure("empty response")

    block = extract_json_block(strip_code_fences(raw))
    if block is None:
        return ParseFailure("no JSON object found")

    try:
        payload = _load_object(block)
    except json.JSONDecodeError as exc:
        return ParseFailure(f"invalid JSON after repair: {exc.msg}")

    if not isinstance(payload, dict):
        return ParseFailure("JSON value is not an object")

    return validate_payload(payload, schema)
