"""Prompt builders for research, writing and section rewrites."""

from __future__ import annotations

from .style_guide import STYLE_RULES, structure_template
from .types import ChallengeTopic, StoryTopic, UrlBank

RESEARCH_REQUIREMENTS = """# RESEARCH REQUIREMENTS:
1. Find recent, reputable sources (the last 7 days preferred)
2. Fact-check claims and statistics against more than one source
3. Gather key details, quotes, context and background
4. Prefer primary sources (original announcements, company blogs, filings)
5. For videos or posts, cite the publisher URL rather than rehosted clips
6. Note any verification issues or conflicting information

# OUTPUT FORMAT:
- **Key Facts**: verified statistics, dates, names and claims
- **Sources**: canonical URLs from reputable outlets
- **Quotes**: important statements from key people or organizations
- **Context**: background and why this matters
- **Verification Notes**: concerns or conflicting information"""


def _topic_block(topic: StoryTopic) -> str:
    lines = [f"Title: {topic.title}" if topic.url else f"Topic: {topic.title}"]
    if topic.url:
        lines.append(f"Source URL: {topic.url}")
    if topic.summary:
        lines.append(f"Summary: {topic.summary}")
    return "\n".join(lines)


def story_research_prompt(newsletter_name: str, label: str, topic: StoryTopic) -> str:
    return (
        f"You are a research assistant for the {newsletter_name} AI newsletter. "
        f"Research the following story and gather comprehensive, fact-checked information.\n\n"
        f"# {label.upper()}\n{_topic_block(topic)}\n\n{RESEARCH_REQUIREMENTS}"
    )


def quick_link_research_prompt(newsletter_name: str, topic: StoryTopic) -> str:
    return (
        f"You are a research assistant for the {newsletter_name} AI newsletter. "
        f"Verify this short news item for the Weekly Scoop section and find its best "
        f"canonical source.\n\n{_topic_block(topic)}\n\n"
        "Reply with two or three sentences of verified facts and the canonical URL."
    )


def digest_research_prompt(newsletter_name: str, count: int) -> str:
    return (
        f"You are a research assistant for the {newsletter_name} AI newsletter. "
        f"Find {count} diverse, newsworthy AI stories from the past week for the Weekly "
        "Scoop section. Use varied, reputable outlets and include one video link when "
        "relevant.\n\nFor each story give a one-line headline, two sentences of verified "
        "facts and its canonical URL."
    )


def challenge_research_prompt(newsletter_name: str, challenge: ChallengeTopic) -> str:
    description = f"\nDescription: {challenge.description}" if challenge.description else ""
    return (
        f"You are a research assistant for the {newsletter_name} AI newsletter. "
        "Find tutorials, videos or official resources that help readers complete this "
        f"weekly challenge.\n\nTitle: {challenge.title}{description}\n\n"
        "List each resource with one sentence on how it helps and its canonical URL."
    )


def write_prompt(
    *,
    newsletter_name: str,
    issue_number: int,
    research: dict[str, str],
    url_bank: UrlBank,
    has_secondary: bool,
    has_challenge: bool,
    digest_size: int,
    preview_bullets: int,
    target_words: int,
) -> str:
    notes = "\n\n".join(f"## {label}\n{text}" for label, text in research.items())
    structure = structure_template(
        newsletter_name,
        has_secondary=has_secondary,
        has_challenge=has_challenge,
        digest_size=digest_size,
        preview_bullets=preview_bullets,
        target_words=target_words,
    )
    return f"""You are the writer for {newsletter_name}, a newsletter about AI news. You are generating Issue #{issue_number}.

# RESEARCH NOTES:

{notes}

# VERIFIED URL BANK
{url_bank.render()}

# STYLE GUIDE (MANDATORY):

{STYLE_RULES}

# REQUIRED STRUCTURE (every section, in this order):

{structure}

# URL RULES:
1. ONLY use URLs from the VERIFIED URL BANK above
2. Copy URLs exactly, character for character
3. Never invent, shorten or placeholder a URL
4. If a claim has no URL in the bank, use a different claim or leave it unlinked

# OUTPUT:
Output ONLY the complete newsletter, with no commentary, wrapped in a ```markdown code block."""


def rewrite_prompt(
    *, section_markdown: str, word_count: int, target_words: int, links: list[tuple[str, str]]
) -> str:
    link_lines = "\n".join(f"- [{text}]({url})" for text, url in links) or "- (none)"
    direction = "Shorten" if word_count > target_words else "Expand"
    return f"""{direction} the newsletter section below from {word_count} words to about {target_words} words.

Rules:
- Keep the heading lines exactly as they are
- Keep every one of these links with its exact anchor text and URL:
{link_lines}
- Add no new links and no bare URLs
- Change only the surrounding prose; keep facts, tone and markdown structure

Return ONLY the rewritten section as markdown, with no commentary.

SECTION:
{section_markdown}"""


__all__ = [
    "story_research_prompt",
    "quick_link_research_prompt",
    "digest_research_prompt",
    "challenge_research_prompt",
    "write_prompt",
    "rewrite_prompt",
]
