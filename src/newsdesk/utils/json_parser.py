"""
JSON extraction from LLM responses.

Judges are asked for JSON but replies still arrive wrapped in prose,
markdown code fences, or with trailing commas. These helpers recover the
payload or return an empty result; they never raise on malformed text.
"""

from __future__ import annotations

import ast
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCED_OBJECT = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_FENCED_ARRAY = re.compile(r"```(?:json)?\s*(\[.*?\])\s*```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def _loads_lenient(raw: str) -> Any:
    """Parse with progressively looser repairs; None when nothing works."""
    for candidate in (raw, _TRAILING_COMMA.sub(r"\1", raw)):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    # Raw newlines inside string values
    flattened = _TRAILING_COMMA.sub(r"\1", re.sub(r"(?<!\\)\n", " ", raw))
    try:
        return json.loads(flattened)
    except json.JSONDecodeError:
        pass

    # Python-literal style replies ('key': True)
    try:
        return ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return None


def _balanced_span(text: str, start: int, open_ch: str, close_ch: str) -> str | None:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Extract the first JSON object from an LLM response."""
    if not text:
        return None

    fenced = _FENCED_OBJECT.search(text)
    if fenced:
        result = _loads_lenient(fenced.group(1))
        if isinstance(result, dict):
            return result

    text = text.replace("&quot;", '"').replace("&#34;", '"')
    start = text.find("{")
    while start >= 0:
        span = _balanced_span(text, start, "{", "}")
        if span is None:
            break
        result = _loads_lenient(span)
        if isinstance(result, dict):
            return result
        start = text.find("{", start + 1)

    logger.debug("No JSON object found in response (%s chars)", len(text))
    return None


def extract_json_array(text: str) -> list[Any]:
    """Extract the first JSON array from an LLM response ([] when absent)."""
    if not text or len(text.strip()) < 2:
        logger.warning("Empty or too short response: '%s'", text[:100] if text else "None")
        return []

    fenced = _FENCED_ARRAY.search(text)
    if fenced:
        result = _loads_lenient(fenced.group(1))
        if isinstance(result, list):
            return result

    start = text.find("[")
    while start >= 0:
        span = _balanced_span(text, start, "[", "]")
        if span is None:
            break
        result = _loads_lenient(span)
        if isinstance(result, list):
            logger.debug("Parsed array: %s items", len(result))
            return result
        start = text.find("[", start + 1)

    logger.warning("No JSON array found in response")
    return []


__all__ = ["extract_json_object", "extract_json_array"]
