"""Newsletter style contract: writing rules, section layout and section markers.

The same markers drive the prompt (what the writer is told to produce) and the
checks (what a finished draft must contain), so the two cannot drift apart.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

STYLE_RULES = """CRITICAL FORMATTING RULES:
1. Headers are single-part Title Case phrases with no punctuation (no colons, commas or dashes)
2. No em dashes and no unnecessary hyphens anywhere
3. Every fact must be recent and backed by the research notes
4. Embed links over natural anchor text only. NEVER show a bare URL
5. Use each exact URL once across the whole newsletter
6. Never add tracking parameters (utm, ref, share) to a URL
7. Emoji may appear only in headers, in bullet lines and at the start of Weekly Scoop lines

LINK EMBEDDING STANDARD:
- Anchors are natural noun phrases of 3 to 9 words
- Never use "click here", "read more" or "learn more" as anchors
- Do not lead sentences with "According to" and use it at most twice overall
- Link the first mention only, over the claim or noun rather than punctuation
- Keep outlet names out of anchors unless the outlet is the subject

HEADER AND BULLET RULES:
- One emoji per header or bullet line
- Each H1 and H2 takes a distinct angle and does not repeat words
- "In This Newsletter" bullets use sentence case and do not reuse words or emoji from later headers
"""


@dataclass(frozen=True)
class SectionSpec:
    label: str
    # Regex (case-insensitive, multiline) that proves the section is present
    marker: str
    # None: always required; otherwise the IssueContent slot it depends on
    requires: str | None = None


SECTION_SPECS: tuple[SectionSpec, ...] = (
    SectionSpec("Subject Line", r"^\W*subject line"),
    SectionSpec("Preview Text", r"^\W*preview text"),
    SectionSpec("Newsletter Title", r"^\W*newsletter title"),
    SectionSpec("Welcome", r"^#{1,6}\s.*welcome"),
    SectionSpec("In This Newsletter", r"^#{1,6}\s.*in this newsletter"),
    SectionSpec("Weekly Scoop", r"^#{1,6}\s.*weekly scoop"),
    SectionSpec("Weekly Challenge", r"^#{1,6}\s.*weekly challenge", requires="challenge"),
    SectionSpec("Wrap Up", r"^#{1,6}\s.*wrap up"),
    SectionSpec("Sources", r"^#{1,6}\s.*sources"),
)

# Fixed section names, matched against a heading's plain text (leading emoji allowed)
KNOWN_SECTION_RE = re.compile(
    r"^\W*(?:welcome|in this newsletter|weekly scoop|weekly challenge|wrap up|sources)\b",
    re.IGNORECASE,
)
SCOOP_HEADING_RE = re.compile(r"weekly scoop", re.IGNORECASE)
PREVIEW_HEADING_RE = re.compile(r"in this newsletter", re.IGNORECASE)

# Line-start tokens for trimming a reply that has no fenced block
START_TOKENS: tuple[str, ...] = ("**Subject Line", "Subject Line", "Welcome", "#")

# Last visible character of a complete draft
TERMINAL_CHARS = ".!?)\"'’”"


def structure_template(
    newsletter_name: str,
    *,
    has_secondary: bool,
    has_challenge: bool,
    digest_size: int = 6,
    preview_bullets: int = 5,
    target_words: int = 350,
) -> str:
    """Section-by-section layout the writer must follow."""
    lines = [
        "**Subject Line:** 40 to 60 characters, clicky, about the main story",
        "**Preview Text:** 70 to 95 characters teasing the secondary story and one Weekly Scoop item",
        "**Newsletter Title:** at most 60 characters, a fresh angle on the main story",
        "",
        f"## Welcome To This Week's Edition Of {newsletter_name}",
        "45 to 70 words highlighting the main"
        + (" and secondary stories" if has_secondary else " story")
        + ". End with the sentence \"Let's dive in.\" and use no emoji in this paragraph.",
        "",
        "## In This Newsletter",
        f"Exactly {preview_bullets} bullets written as \"- <emoji> <short headline>\":",
        "main story, "
        + ("secondary story, " if has_secondary else "")
        + "Weekly Scoop items"
        + (", weekly challenge" if has_challenge else "")
        + " (fill the remaining bullets with Weekly Scoop items).",
        "",
        "# <emoji> <Main Story Headline>",
        f"About {target_words} words: one intro paragraph, then two or three H2 subsections each led by an emoji.",
    ]
    if has_secondary:
        lines += [
            "",
            "# <emoji> <Secondary Story Headline>",
            f"About {target_words} words: one intro paragraph, then one to three H2 subsections each led by an emoji.",
        ]
    lines += [
        "",
        "## Weekly Scoop 📢",
        f"Exactly {digest_size} lines, separated by blank lines. Each line starts with a distinct emoji,"
        " holds exactly one embedded link over natural anchor text, and covers a story not used above:",
        "🦴 [natural anchor phrase](https://url-from-the-bank) rest of the headline",
    ]
    if has_challenge:
        lines += [
            "",
            "## 🎯 Weekly Challenge <Challenge Name>",
            "150 to 200 words with clear steps or scoring.",
        ]
    lines += [
        "",
        "## Wrap Up",
        "One bold line of one to two sentences inviting replies.",
        "",
        "## Sources",
        "One sentence naming the outlets used, without links, ending with a period.",
    ]
    return "\n".join(lines)


__all__ = [
    "STYLE_RULES",
    "SectionSpec",
    "SECTION_SPECS",
    "KNOWN_SECTION_RE",
    "SCOOP_HEADING_RE",
    "PREVIEW_HEADING_RE",
    "START_TOKENS",
    "TERMINAL_CHARS",
    "structure_template",
]
