"""Non-blocking heuristics run after compliance passes."""

from __future__ import annotations

import re

from newsdesk.cortex.graphs.newsletter.checks import (
    preview_bullet_count,
    section_word_count,
    story_sections,
)

MAIN_STORY_WORDS = (300, 500)
PREVIEW_BULLETS = 5

REQUIRED_SECTIONS: dict[str, str] = {
    "Welcome": r"^#{1,6}\s.*welcome",
    "In This Newsletter": r"^#{1,6}\s.*in this newsletter",
    "Weekly Scoop": r"^#{1,6}\s.*weekly scoop",
    "Wrap Up": r"^#{1,6}\s.*wrap up",
}


def final_check(markdown: str, *, has_challenge: bool = False) -> list[str]:
    """Issues found; these become warnings and never abort publication."""
    issues: list[str] = []

    stories = story_sections(markdown)
    if stories:
        words = section_word_count(stories[0])
        low, high = MAIN_STORY_WORDS
        if not low <= words <= high:
            issues.append(f"Main story word count: {words} (target: {low}-{high} words)")

    required = dict(REQUIRED_SECTIONS)
    if has_challenge:
        required["Weekly Challenge"] = r"^#{1,6}\s.*weekly challenge"
    for label, marker in required.items():
        if not re.search(marker, markdown, re.IGNORECASE | re.MULTILINE):
            issues.append(f"Missing required section: {label}")

    bullets = preview_bullet_count(markdown)
    if bullets is not None and bullets != PREVIEW_BULLETS:
        issues.append(
            f'"In this newsletter" should have exactly {PREVIEW_BULLETS} bullets (found: {bullets})'
        )
    return issues


__all__ = ["final_check"]
