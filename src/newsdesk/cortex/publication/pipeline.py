"""Publication pipeline: selected stories -> published newsletter document.

Phases, with their failure policy:

    1. resolve content          fatal if the main story is missing
    2. fact-check main story    warning
    3. draft generation         fatal
    4. compliance loop          fatal when unresolved (unless overridden)
    5. hero image               warning
    6. publish document         fatal
    7. persist document URL     warning
    8. save draft + version     warning
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from newsdesk.core.config import Config
from newsdesk.core.exceptions import ComplianceError, NotFoundError
from newsdesk.core.types import Challenge, Issue, Lead, PublicationResult, utcnow
from newsdesk.cortex.compliance import ComplianceFixer, final_check, run_compliance_loop
from newsdesk.cortex.graphs.newsletter import (
    ChallengeTopic,
    DraftGenerator,
    IssueContent,
    StoryTopic,
)
from newsdesk.cortex.services.drafts import DraftService, document_title
from newsdesk.modules.markdown import render_document
from newsdesk.modules.providers.documents.base import BaseDocumentPublisher
from newsdesk.modules.providers.storage.base import BaseStore

from .illustrator import HeroImage, Illustrator
from .investigator import FactChecker

logger = logging.getLogger(__name__)


@dataclass
class ResolvedContent:
    main_story: Lead
    secondary_story: Lead | None = None
    quick_links: list[Lead] = field(default_factory=list)
    challenge: Challenge | None = None

    def to_issue_content(self) -> IssueContent:
        def topic(lead: Lead) -> StoryTopic:
            return StoryTopic(title=lead.title, url=lead.url, summary=lead.summary)

        return IssueContent(
            main_story=topic(self.main_story),
            secondary_story=topic(self.secondary_story) if self.secondary_story else None,
            quick_links=[topic(lead) for lead in self.quick_links],
            challenge=(
                ChallengeTopic(title=self.challenge.title, description=self.challenge.description)
                if self.challenge
                else None
            ),
        )


class PublicationPipeline:
    def __init__(
        self,
        *,
        store: BaseStore,
        generator: DraftGenerator,
        fixer: ComplianceFixer,
        publisher: BaseDocumentPublisher,
        fact_checker: FactChecker | None = None,
        illustrator: Illustrator | None = None,
        drafts: DraftService | None = None,
        config: Config | None = None,
    ) -> None:
        self._store = store
        self._generator = generator
        self._fixer = fixer
        self._publisher = publisher
        self._fact_checker = fact_checker
        self._illustrator = illustrator
        self._config = config or Config()
        self._drafts = drafts or DraftService(store, publisher=publisher, config=self._config)

    async def resolve_content(self, issue: Issue) -> ResolvedContent:
        main = await self._store.get_lead(issue.main_story_id) if issue.main_story_id else None
        if main is None:
            raise NotFoundError("Main story not found")

        secondary = None
        if issue.secondary_story_id:
            secondary = await self._store.get_lead(issue.secondary_story_id)

        quick_links: list[Lead] = []
        for lead_id in issue.quick_link_ids:
            lead = await self._store.get_lead(lead_id)
            if lead is not None:
                quick_links.append(lead)

        challenge = None
        if issue.challenge_id:
            challenge = await self._store.get_challenge(issue.challenge_id)

        return ResolvedContent(
            main_story=main, secondary_story=secondary, quick_links=quick_links, challenge=challenge
        )

    async def _fact_check(self, lead: Lead, warnings: list[str]) -> None:
        if self._fact_checker is None:
            return
        try:
            result = await self._fact_checker.verify(lead)
        except Exception as e:
            logger.warning("Fact-check failed, continuing anyway: %s", e)
            warnings.append(f"Fact-check skipped: {e}")
            return

        if result.status == "failed":
            logger.warning("Fact-check warning (continuing anyway): %s", ", ".join(result.issues))
            warnings.append(f"Fact-check warning: {', '.join(result.issues)}")
        elif result.status == "warning":
            warnings.extend(result.issues)
        lead.fact_check_status = result.status
        if result.primary_source_url and result.primary_source_url != lead.url:
            lead.primary_source_url = result.primary_source_url

    async def _enforce_compliance(
        self, markdown: str, warnings: list[str], *, has_challenge: bool
    ) -> str:
        cfg = self._config.compliance
        outcome = await run_compliance_loop(markdown, self._fixer, max_attempts=cfg.max_attempts)
        if not outcome.ok:
            violations = outcome.result.violations
            if not cfg.allow_publish_with_violations:
                raise ComplianceError(
                    f"Could not fix compliance violations after {outcome.attempts} attempts: "
                    + ", ".join(violations),
                    violations=violations,
                )
            logger.warning("Publishing with %s unresolved violations", len(violations))
            warnings.extend(f"Unresolved violation: {v}" for v in violations)
        else:
            logger.info("✓ Compliance validation passed")

        issues = final_check(outcome.value, has_challenge=has_challenge)
        if issues:
            logger.info("Quality warnings: %s", "; ".join(issues))
            warnings.extend(issues)
        return outcome.value

    async def _illustrate(self, lead: Lead, warnings: list[str]) -> HeroImage | None:
        if self._illustrator is None or not self._config.images.enabled:
            warnings.append("Hero image generation not available")
            return None
        hero = await self._illustrator.generate_hero_image(lead)
        if hero is None:
            warnings.append("Hero image generation failed")
        return hero

    async def execute(self, issue: Issue | int) -> PublicationResult:
        start = time.monotonic()
        warnings: list[str] = []

        def elapsed() -> float:
            return round(time.monotonic() - start, 1)

        try:
            if not isinstance(issue, Issue):
                found = await self._store.get_issue(issue)
                if found is None:
                    raise NotFoundError(f"Issue {issue} not found")
                issue = found
            number = issue.issue_number
            logger.info("━━━ Starting publication for issue #%s ━━━", number)

            logger.info("Phase 1: Resolving content...")
            content = await self.resolve_content(issue)

            logger.info("Phase 2: Fact-checking main story...")
            await self._fact_check(content.main_story, warnings)

            logger.info("Phase 3: Writing newsletter...")
            outcome = await self._generator.generate(content.to_issue_content(), number)
            warnings.extend(outcome.warnings)

            logger.info("Phase 4: Validating compliance...")
            markdown = await self._enforce_compliance(
                outcome.markdown, warnings, has_challenge=content.challenge is not None
            )

            logger.info("Phase 5: Generating hero image...")
            hero = await self._illustrate(content.main_story, warnings)

            logger.info("Phase 6: Publishing document...")
            document_url = await self._publisher.publish(
                markdown,
                render_document(markdown),
                title=document_title(self._config, number),
                image_url=hero.image_url if hero else None,
            )

            logger.info("Phase 7: Saving document URL...")
            if issue.id is not None:
                try:
                    await self._store.update_issue(
                        issue.id, document_url=document_url, published_at=utcnow()
                    )
                except Exception as e:
                    logger.warning("Failed to update issue record: %s", e)
                    warnings.append(f"Issue record not updated: {e}")

            logger.info("Phase 8: Saving draft version...")
            try:
                await self._drafts.record_publication(
                    issue_number=number,
                    issue_id=issue.id,
                    content=markdown,
                    document_url=document_url,
                    hero_image_url=hero.image_url if hero else None,
                    hero_image_prompt=hero.prompt if hero else None,
                )
            except Exception as e:
                logger.warning("Failed to save draft: %s", e)
                warnings.append(f"Draft not saved: {e}")

        except Exception as e:
            duration = elapsed()
            logger.error("✗ Publication failed (%ss): %s", duration, e)
            return PublicationResult(
                success=False, document_url=None, error=str(e), warnings=warnings, duration_sec=duration
            )

        duration = elapsed()
        logger.info("✓ Publication complete (%ss): %s", duration, document_url)
        return PublicationResult(
            success=True, document_url=document_url, warnings=warnings, duration_sec=duration
        )


__all__ = ["ResolvedContent", "PublicationPipeline"]
