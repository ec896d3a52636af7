"""Pure checks over a generated draft: extraction, completeness, digest, story sections."""

from __future__ import annotations

import re

from newsdesk.modules.markdown import (
    Block,
    Section,
    contains_emoji,
    find_section,
    parse_blocks,
    section_at,
    starts_with_emoji,
    word_count,
)
from newsdesk.modules.markdown.parser import all_links
from newsdesk.utils.urls import MARKDOWN_LINK_RE

from .style_guide import (
    KNOWN_SECTION_RE,
    PREVIEW_HEADING_RE,
    SCOOP_HEADING_RE,
    SECTION_SPECS,
    START_TOKENS,
    TERMINAL_CHARS,
)
from .types import UrlBank

_FENCE_RE = re.compile(r"```markdown[ \t]*\n(.*?)\n?```", re.DOTALL)
_START_RE = re.compile(
    "^(?:" + "|".join(re.escape(token) for token in START_TOKENS) + ")", re.MULTILINE
)


def extract_markdown(reply: str) -> str:
    """Markdown from a ```markdown fence, else the reply trimmed to its first section."""
    match = _FENCE_RE.search(reply)
    if match:
        return match.group(1).strip()
    start = _START_RE.search(reply)
    if start:
        return reply[start.start() :].strip()
    return reply.strip()


def is_known_section(block: Block) -> bool:
    return bool(KNOWN_SECTION_RE.search(block.plain_text()))


def _is_story_boundary(heading: Block, candidate: Block) -> bool:
    # H2 subsections belong to the story unless they open a fixed section
    if candidate.level == 1:
        return True
    return candidate.level <= 2 and is_known_section(candidate)


def story_sections(markdown: str, blocks: list[Block] | None = None) -> list[Section]:
    """Main and secondary story sections: H1s after the preview list, in order.

    Each runs from its H1 to the next H1 or fixed-section heading (H1 or H2).
    """
    blocks = blocks if blocks is not None else parse_blocks(markdown)
    total = len(markdown.split("\n"))

    after = 0
    for block in blocks:
        if block.is_heading and PREVIEW_HEADING_RE.search(block.plain_text()):
            after = block.start
            break

    sections: list[Section] = []
    for block in blocks:
        if not block.is_heading or block.level != 1 or block.start < after:
            continue
        if is_known_section(block):
            continue
        sections.append(
            section_at(blocks, block, total_lines=total, is_boundary=_is_story_boundary)
        )
    return sections


def section_word_count(section: Section) -> int:
    """Story words, headline included; heading markers, emoji and link syntax excluded."""
    return word_count([section.heading, *section.blocks])


def _ends_cleanly(markdown: str) -> bool:
    lines = [line for line in markdown.split("\n") if line.strip()]
    if not lines:
        return False
    last = lines[-1].strip().strip("*_").rstrip()
    if not last:
        return False
    return last[-1] in TERMINAL_CHARS or contains_emoji(last[-1])


def completeness_issues(
    markdown: str,
    *,
    finish_reason: str = "stop",
    has_secondary: bool = False,
    has_challenge: bool = False,
) -> list[str]:
    """Missing section markers plus truncation signals. Empty means complete."""
    issues: list[str] = []
    present = {"challenge": has_challenge, "secondary": has_secondary}

    for spec in SECTION_SPECS:
        if spec.requires and not present.get(spec.requires, False):
            continue
        if not re.search(spec.marker, markdown, re.IGNORECASE | re.MULTILINE):
            issues.append(f"Missing section: {spec.label}")

    stories = story_sections(markdown)
    if not stories:
        issues.append("Missing section: Main Story (H1)")
    if has_secondary and len(stories) < 2:
        issues.append("Missing section: Secondary Story (H1)")

    if finish_reason == "max_tokens":
        issues.append("Completion hit the output token limit")
    if not _ends_cleanly(markdown):
        issues.append("Draft appears truncated (ends mid-sentence)")
    return issues


def digest_issues(markdown: str, expected: int = 6) -> list[str]:
    """Weekly Scoop must hold `expected` emoji-led lines with one embedded link each."""
    section = find_section(
        markdown,
        lambda b: bool(SCOOP_HEADING_RE.search(b.plain_text())),
        is_boundary=lambda heading, candidate: True,
    )
    if section is None:
        return ["Weekly Scoop section not found"]

    headlines = [line for line in section.lines(markdown)[1:] if starts_with_emoji(line)]
    total = len(headlines)
    linked = sum(1 for line in headlines if len(MARKDOWN_LINK_RE.findall(line)) == 1)

    issues: list[str] = []
    if total != expected:
        issues.append(f"Weekly Scoop has {total} headlines (expected {expected})")
    if linked != total:
        issues.append(f"{linked}/{total} headlines have embedded URLs")
    return issues


def links_outside_bank(markdown: str, bank: UrlBank) -> list[str]:
    """Link targets that research never returned."""
    if not len(bank):
        return []
    seen: dict[str, None] = {}
    for link in all_links(markdown):
        if link.url not in bank:
            seen.setdefault(link.url, None)
    return list(seen)


def preview_bullet_count(markdown: str) -> int | None:
    """Bullets under "In This Newsletter", or None when the section is missing."""
    section = find_section(markdown, lambda b: bool(PREVIEW_HEADING_RE.search(b.plain_text())))
    if section is None:
        return None
    return sum(1 for block in section.blocks if block.kind == "list_item")


__all__ = [
    "extract_markdown",
    "is_known_section",
    "story_sections",
    "section_word_count",
    "completeness_issues",
    "digest_issues",
    "links_outside_bank",
    "preview_bullet_count",
]
