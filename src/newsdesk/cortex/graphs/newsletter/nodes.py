"""Node factories for the newsletter draft graph.

Each `make_*_node` closes over its collaborators and returns an async node.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from newsdesk.core.config import DraftConfig
from newsdesk.core.exceptions import ResearchError
from newsdesk.modules.markdown import Section, parse_blocks, replace_lines, strip_code_fence
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.modules.research.base import BaseResearcher

from .checks import (
    completeness_issues,
    digest_issues,
    extract_markdown,
    links_outside_bank,
    section_word_count,
    story_sections,
)
from .prompts import (
    challenge_research_prompt,
    digest_research_prompt,
    quick_link_research_prompt,
    rewrite_prompt,
    story_research_prompt,
    write_prompt,
)
from .state import NewsletterState
from .types import SLOT_LABELS, IssueContent, UrlBank

logger = logging.getLogger(__name__)

STORY_LABELS = ("Main story", "Secondary story")


def _research_jobs(content: IssueContent, name: str, digest_size: int) -> list[tuple[str, str]]:
    jobs = [("main", story_research_prompt(name, SLOT_LABELS["main"], content.main_story))]
    if content.secondary_story:
        jobs.append(
            ("secondary", story_research_prompt(name, SLOT_LABELS["secondary"], content.secondary_story))
        )
    if content.quick_links:
        jobs.extend(("scoop", quick_link_research_prompt(name, link)) for link in content.quick_links)
    else:
        jobs.append(("scoop", digest_research_prompt(name, digest_size)))
    if content.challenge:
        jobs.append(("challenge", challenge_research_prompt(name, content.challenge)))
    return jobs


def _seed_bank(content: IssueContent) -> UrlBank:
    """Start the bank with the URLs the editor selected."""
    bank = UrlBank()
    bank.add("main", [content.main_story.url] if content.main_story.url else [])
    if content.secondary_story:
        url = content.secondary_story.url
        bank.add("secondary", [url] if url else [])
    bank.add("scoop", [link.url for link in content.quick_links if link.url])
    if content.challenge:
        bank.add("challenge", [])
    return bank


def make_research_node(*, researcher: BaseResearcher, config: DraftConfig):
    """Research every content slot in one batch. Any failure fails the phase."""

    async def research_node(state: NewsletterState) -> dict[str, Any]:
        content = state["content"]
        jobs = _research_jobs(content, config.newsletter_name, config.digest_size)
        logger.info("Researching %s content slots", len(jobs))

        try:
            results = await asyncio.gather(*(researcher.research(prompt) for _, prompt in jobs))
        except ResearchError:
            raise
        except Exception as e:
            raise ResearchError(f"Research phase failed: {e}") from e

        research: dict[str, str] = {}
        bank = _seed_bank(content)
        for (slot, _), result in zip(jobs, results):
            label = SLOT_LABELS[slot]
            text = result.answer.strip()
            research[label] = f"{research[label]}\n\n{text}" if label in research else text
            bank.add(slot, result.citations)

        logger.info("Research complete: %s URLs in bank", len(bank))
        return {"research": research, "url_bank": bank}

    return research_node


def make_draft_node(*, model: BaseModel, config: DraftConfig):
    async def draft_node(state: NewsletterState) -> dict[str, Any]:
        content = state["content"]
        attempt = state.get("attempt", 0)
        temperature = round(config.base_temperature + config.temperature_step * attempt, 2)
        logger.info(
            "Draft attempt %s/%s (temperature %.2f)", attempt + 1, config.max_retries, temperature
        )

        prompt = write_prompt(
            newsletter_name=config.newsletter_name,
            issue_number=state.get("issue_number", 0),
            research=state.get("research", {}),
            url_bank=state.get("url_bank") or UrlBank(),
            has_secondary=content.secondary_story is not None,
            has_challenge=content.challenge is not None,
            digest_size=config.digest_size,
            preview_bullets=config.preview_bullets,
            target_words=config.target_words,
        )
        response = await model.generate(
            ModelRequest.from_prompt(
                prompt, temperature=temperature, max_output_tokens=config.max_output_tokens
            )
        )
        return {
            "markdown": extract_markdown(response.text),
            "finish_reason": response.finish_reason,
            "attempt": attempt + 1,
        }

    return draft_node


def _stories_to_check(markdown: str, content: IssueContent) -> list[Section]:
    return story_sections(markdown)[: 2 if content.secondary_story else 1]


def _in_range(count: int, config: DraftConfig) -> bool:
    return config.min_words <= count <= config.max_words


def make_validate_node(*, config: DraftConfig):
    """Score the latest attempt, keep the best one, decide whether drafting is over."""

    async def validate_node(state: NewsletterState) -> dict[str, Any]:
        content = state["content"]
        markdown = state.get("markdown", "")
        attempt = state.get("attempt", 0)

        issues = completeness_issues(
            markdown,
            finish_reason=state.get("finish_reason", "stop"),
            has_secondary=content.secondary_story is not None,
            has_challenge=content.challenge is not None,
        ) + digest_issues(markdown, config.digest_size)

        update: dict[str, Any] = {"issues": issues}
        best_markdown = state.get("best_markdown", "")
        best_issues = state.get("best_issues")
        if best_issues is None or len(issues) < len(best_issues):
            best_markdown, best_issues = markdown, issues
            update.update(best_markdown=markdown, best_issues=issues)

        if issues:
            logger.warning("Draft attempt %s has issues: %s", attempt, "; ".join(issues))

        if issues and attempt < config.max_retries:
            update["done_drafting"] = False
            return update

        if best_issues:
            logger.warning(
                "Proceeding with best draft after %s attempts (%s issues)",
                attempt,
                len(best_issues),
            )
        warnings = list(best_issues)
        warnings += [
            f"Link not in URL bank: {url}"
            for url in links_outside_bank(best_markdown, state.get("url_bank") or UrlBank())
        ]
        update.update(
            markdown=best_markdown,
            done_drafting=True,
            rewrite_needed=any(
                not _in_range(section_word_count(s), config)
                for s in _stories_to_check(best_markdown, content)
            ),
            warnings=warnings,
        )
        return update

    return validate_node


def _rewrite_problem(original: str, rewritten: str, links: list[tuple[str, str]]) -> str | None:
    if not rewritten:
        return "empty reply"
    if rewritten.split("\n", 1)[0].strip() != original.split("\n", 1)[0].strip():
        return "heading changed"
    kept = {(link.text, link.url) for block in parse_blocks(rewritten) for link in block.links()}
    kept_urls = {url for _, url in kept}
    # A link turned into a bare URL counts as dropped
    dropped = [url for _, url in links if url not in kept_urls]
    if dropped:
        return f"dropped {len(dropped)} links"
    changed = [pair for pair in links if pair not in kept]
    if changed:
        return f"changed {len(changed)} link anchors"
    return None


def make_rewrite_node(*, model: BaseModel, config: DraftConfig):
    """Bring story sections into the word range. Best effort; never raises."""

    async def rewrite_node(state: NewsletterState) -> dict[str, Any]:
        content = state["content"]
        markdown = state.get("markdown", "")
        warnings: list[str] = []

        for index, label in enumerate(STORY_LABELS):
            sections = _stories_to_check(markdown, content)
            if index >= len(sections):
                break
            section = sections[index]
            count = section_word_count(section)
            if _in_range(count, config):
                continue

            logger.info("%s has %s words, rewriting to ~%s", label, count, config.target_words)
            original = section.text(markdown)
            links = [
                (link.text, link.url)
                for block in (section.heading, *section.blocks)
                for link in block.links()
            ]
            try:
                response = await model.generate(
                    ModelRequest.from_prompt(
                        rewrite_prompt(
                            section_markdown=original,
                            word_count=count,
                            target_words=config.target_words,
                            links=links,
                        ),
                        temperature=config.rewrite_temperature,
                        max_output_tokens=4096,
                    )
                )
            except Exception as e:
                logger.warning("%s rewrite failed: %s", label, e)
                warnings.append(f"{label} rewrite failed, kept {count} words: {e}")
                continue

            rewritten = strip_code_fence(response.text)
            problem = _rewrite_problem(original, rewritten, links)
            if problem:
                logger.warning("%s rewrite rejected: %s", label, problem)
                warnings.append(f"{label} rewrite rejected ({problem}), kept {count} words")
                continue

            markdown = replace_lines(markdown, section.start, section.end, rewritten)
            updated = _stories_to_check(markdown, content)
            new_count = section_word_count(updated[index]) if index < len(updated) else 0
            if not _in_range(new_count, config):
                warnings.append(
                    f"{label} is {new_count} words after rewrite "
                    f"(target {config.min_words}-{config.max_words})"
                )
            logger.info("%s rewritten: %s -> %s words", label, count, new_count)

        return {"markdown": markdown, "warnings": warnings}

    return rewrite_node


__all__ = [
    "make_research_node",
    "make_draft_node",
    "make_validate_node",
    "make_rewrite_node",
]
