"""Emoji detection and word counting on plain text."""

from __future__ import annotations

import re

# Pictographs, dingbats, arrows and the joiners/selectors that glue them.
EMOJI_CLASS = (
    "["
    "\U0001f000-\U0001faff"
    "\u2300-\u23ff"
    "\u2600-\u27bf"
    "\u2b00-\u2bff"
    "\u3030\u303d\u3297\u3299"
    "\ufe0f\u200d\u20e3"
    "]"
)
EMOJI_RE = re.compile(EMOJI_CLASS + "+")
EMOJI_LED_RE = re.compile(r"^\s*(?:[-*+]\s+)?" + EMOJI_CLASS)

_WORD_RE = re.compile(r"\w", re.UNICODE)
_WRAPPING_FENCE_RE = re.compile(r"^\s*```(?:markdown|md)?[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)


def contains_emoji(text: str) -> bool:
    return EMOJI_RE.search(text) is not None


def starts_with_emoji(line: str) -> bool:
    """True for lines led by an emoji (optionally after a bullet marker)."""
    return EMOJI_LED_RE.match(line) is not None


def strip_emoji(text: str) -> str:
    return EMOJI_RE.sub("", text)


def strip_code_fence(text: str) -> str:
    """Unwrap a reply that is one fenced code block; other text is only stripped."""
    match = _WRAPPING_FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def count_words(text: str) -> int:
    """Whitespace tokens containing at least one word character."""
    return sum(1 for token in text.split() if _WORD_RE.search(token))


__all__ = [
    "EMOJI_CLASS",
    "EMOJI_RE",
    "contains_emoji",
    "starts_with_emoji",
    "strip_emoji",
    "strip_code_fence",
    "count_words",
]
