"""ScoopHunter: one discovery pass from search queries to persisted leads."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from newsdesk.core.config import DiscoveryConfig
from newsdesk.core.types import Candidate, Lead
from newsdesk.modules.providers.storage.base import BaseStore
from newsdesk.modules.research.base import BaseSearch
from newsdesk.utils.urls import clean_url, extract_source

from .dedup import DedupEngine
from .roundup import is_roundup_by_title
from .scoring import CandidateScorer

logger = logging.getLogger(__name__)


class DiscoveryReport(BaseModel):
    searched: int = 0
    duplicates: int = 0
    roundups: int = 0
    scored: int = 0
    stored: int = 0
    failed_queries: list[str] = Field(default_factory=list)
    failed_leads: list[str] = Field(default_factory=list)
    leads: list[Lead] = Field(default_factory=list)


class ScoopHunter:
    def __init__(
        self,
        *,
        search: BaseSearch,
        dedup: DedupEngine,
        scorer: CandidateScorer,
        store: BaseStore,
        config: DiscoveryConfig | None = None,
    ) -> None:
        self._search = search
        self._dedup = dedup
        self._scorer = scorer
        self._store = store
        self._cfg = config or DiscoveryConfig()

    async def collect(self, queries: list[str], report: DiscoveryReport) -> list[Candidate]:
        """Search, prefilter and dedup. Candidate URLs come back cleaned."""
        candidates: list[Candidate] = []
        seen: set[str] = set()

        for query in queries:
            logger.info("Searching: %s", query)
            try:
                hits = await self._search.search(query)
            except Exception as e:
                logger.warning("Search failed for '%s': %s", query, e)
                report.failed_queries.append(query)
                continue

            for hit in hits:
                report.searched += 1
                if is_roundup_by_title(hit.title):
                    logger.info("Skipping roundup-shaped title: %s", hit.title)
                    report.roundups += 1
                    continue

                url = clean_url(hit.url)
                if url in seen:
                    report.duplicates += 1
                    continue

                check = await self._dedup.check_duplicate(url, hit.title)
                if check.is_duplicate:
                    logger.info("Skipping duplicate: %s (%s)", hit.title, check.match_type)
                    report.duplicates += 1
                    continue

                seen.add(url)
                candidates.append(
                    Candidate(
                        title=hit.title,
                        url=url,
                        snippet=hit.snippet,
                        source=extract_source(url),
                    )
                )
        return candidates

    async def run(self, queries: list[str] | None = None) -> DiscoveryReport:
        report = DiscoveryReport()
        queries = queries or self._cfg.search_queries
        logger.info("Starting research cycle (%s queries)", len(queries))

        candidates = await self.collect(queries, report)
        if not candidates:
            logger.info("No new candidates found")
            return report
        logger.info("Found %s unique candidates", len(candidates))

        scored = await self._scorer.score_and_summarize(candidates)
        report.scored = len(scored)

        for candidate in scored:
            if candidate.relevance_score < self._cfg.min_relevance_score:
                continue
            embedding = await self._dedup.embed(candidate.title)
            try:
                lead = await self._store.create_lead(
                    Lead(
                        title=candidate.title,
                        url=candidate.url,
                        summary=candidate.summary,
                        source=candidate.source,
                        relevance_score=candidate.relevance_score,
                        embedding=embedding,
                    )
                )
            except Exception as e:
                logger.warning("Failed to store lead '%s': %s", candidate.title, e)
                report.failed_leads.append(candidate.url)
                continue
            # History only indexes stored leads
            await self._dedup.add_to_history(candidate.url, candidate.title, embedding=embedding)
            report.leads.append(lead)
            report.stored += 1

        logger.info("Research complete. Stored %s new leads.", report.stored)
        return report


__all__ = ["DiscoveryReport", "ScoopHunter"]
