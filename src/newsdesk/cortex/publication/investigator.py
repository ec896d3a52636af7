"""Fact-check a lead: URL liveness plus an LLM primary-source lookup."""

from __future__ import annotations

import logging

from newsdesk.core.types import FactCheckResult, Lead
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.modules.providers.liveness import UrlProbe
from newsdesk.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

PRIMARY_SOURCE_PROMPT = """You are fact-checking an AI news story. Find the original primary source.

Story: {title}
Current source: {url}
Source outlet: {source}

Task: Determine if this is the primary source, or if it is reporting on another source.
- If it is a news article about research, find the original paper URL
- If it is reporting on a company announcement, find the official announcement
- If this IS the primary source, return the same URL

Return JSON:
{{
  "isPrimarySource": boolean,
  "primarySourceUrl": "url or same url if primary",
  "reasoning": "brief explanation"
}}"""


class FactChecker:
    def __init__(self, model: BaseModel, *, probe: UrlProbe | None = None) -> None:
        self._model = model
        self._probe = probe or UrlProbe()

    async def find_primary_source(self, lead: Lead) -> str:
        """Primary source URL; the lead's own URL when the lookup fails."""
        try:
            response = await self._model.generate(
                ModelRequest.from_prompt(
                    PRIMARY_SOURCE_PROMPT.format(title=lead.title, url=lead.url, source=lead.source),
                    temperature=0.2,
                    max_output_tokens=500,
                    response_format="json_object",
                )
            )
        except Exception as e:
            logger.warning("Primary source search failed: %s", e)
            return lead.url

        data = extract_json_object(response.text) or {}
        url = data.get("primarySourceUrl")
        if isinstance(url, str) and url.startswith(("http://", "https://")):
            return url
        return lead.url

    async def verify(self, lead: Lead) -> FactCheckResult:
        logger.info("Fact-checking: %s", lead.title)

        if not await self._probe.is_live(lead.url):
            return FactCheckResult(status="failed", url_live=False, issues=["URL is not accessible"])

        primary = await self.find_primary_source(lead)
        if primary != lead.url:
            logger.info("Found primary source: %s", primary)
        return FactCheckResult(status="verified", url_live=True, primary_source_url=primary)


__all__ = ["PRIMARY_SOURCE_PROMPT", "FactChecker"]
