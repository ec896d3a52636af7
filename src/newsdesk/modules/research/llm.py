"""Search and research backed by a search-grounded completion model."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from newsdesk.core.exceptions import ResearchError
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.utils.json_parser import extract_json_array
from newsdesk.utils.urls import extract_citations

from .base import BaseResearcher, BaseSearch, ResearchResult, SearchHit

logger = logging.getLogger(__name__)

SEARCH_PROMPT = """Search for recent news about: {query}

Return your findings as a JSON array with this exact format:
[
  {{
    "title": "Article headline",
    "url": "https://actual-website.com/article-path",
    "snippet": "1-2 sentence summary"
  }}
]

Requirements:
- Return 5-8 results maximum
- Only include articles from reputable news sources
- Include the ACTUAL article URL (not a redirect URL)
- Focus on articles from the last 7 days
- Return ONLY the JSON array, no other text"""

# Grounding redirect hosts never resolve to the article itself
_REDIRECT_HOSTS = ("vertexaisearch.cloud.google.com",)


class LLMGroundedSearch(BaseSearch):
    def __init__(self, model: BaseModel, *, temperature: float = 0.3) -> None:
        self._model = model
        self._temperature = temperature

    async def search(self, query: str) -> list[SearchHit]:
        logger.info("Grounded search: %s", query)
        response = await self._model.generate(
            ModelRequest.from_prompt(
                SEARCH_PROMPT.format(query=query),
                temperature=self._temperature,
                max_output_tokens=2000,
            )
        )

        hits: list[SearchHit] = []
        for item in extract_json_array(response.text):
            if not isinstance(item, dict):
                continue
            try:
                hit = SearchHit.model_validate(item)
            except ValidationError:
                continue
            if not hit.url or not hit.title:
                continue
            if any(host in hit.url for host in _REDIRECT_HOSTS):
                continue
            hits.append(hit)

        logger.info("Grounded search returned %s results", len(hits))
        return hits


class LLMResearcher(BaseResearcher):
    """Research via a citation-returning model (Perplexity Sonar)."""

    def __init__(
        self,
        model: BaseModel,
        *,
        temperature: float = 0.3,
        max_output_tokens: int = 4000,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    async def research(self, prompt: str) -> ResearchResult:
        try:
            response = await self._model.generate(
                ModelRequest.from_prompt(
                    prompt,
                    temperature=self._temperature,
                    max_output_tokens=self._max_output_tokens,
                )
            )
        except Exception as e:
            raise ResearchError(f"Research failed: {e}") from e

        citations = list(dict.fromkeys([*response.citations, *extract_citations(response.text)]))
        logger.info("Research complete. Found %s citations", len(citations))
        return ResearchResult(answer=response.text, citations=citations)


__all__ = ["SEARCH_PROMPT", "LLMGroundedSearch", "LLMResearcher"]
