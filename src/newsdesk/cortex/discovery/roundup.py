"""Cheap title filter for digest/roundup-shaped headlines."""

from __future__ import annotations

import re

_MONTHS = (
    "january|february|march|april|may|june|july|august|september|october|november|december"
    "|jan|feb|mar|apr|jun|jul|aug|sep|sept|oct|nov|dec"
)

ROUNDUP_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bdigest\b",
        r"\bnewsletter\b",
        r"\b(?:weekly|daily|monthly)\s+(?:round-?up|recap|wrap(?:-?up)?|review|briefing)\b",
        r"\bround-?up\b",
        r"\brecap\b",
        r"\bweek\s+in\s+review\b",
        r"\bthis\s+week\s+in\b",
        r"\btop\s+\d+\b",
        r"^\s*\d+\s+(?:things|stories|headlines|updates|announcements|ways|tools|trends)\b",
        r"\b(?:what\s+you\s+missed|everything\s+announced)\b",
        rf"\b(?:{_MONTHS})\s+\d{{4}}\b",
    )
)


def is_roundup_by_title(title: str) -> bool:
    """True when the headline looks like a multi-story roundup."""
    return any(p.search(title or "") for p in ROUNDUP_PATTERNS)


__all__ = ["ROUNDUP_PATTERNS", "is_roundup_by_title"]
