"""LLM judge that scores and summarizes candidates."""

from __future__ import annotations

import logging

from newsdesk.core.types import Candidate, ScoredCandidate
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

SCORING_PROMPT = """Analyze this AI news story for the {newsletter_name} newsletter:

Title: {title}
Snippet: {snippet}
Source: {source}

Tasks:
1. Score the relevance for a newsletter about AI/ML news (0-100):
   - 80-100: a single, narrative-worthy story from a major actor (lab, company,
     regulator) with a clear "what happened" and "why it matters"
   - 50-79: relevant but incremental updates
   - 0-40: listicles, roundups, opinion filler, or stale news
2. Decide whether the article covers several unrelated stories (a digest,
   roundup, "top N", weekly recap). If it does, set "isRoundup" to true;
   such articles are rejected regardless of score.
3. Write a 1-2 sentence summary suitable for a lead selection interface.

Return JSON:
{{
  "relevanceScore": number (0-100),
  "isRoundup": boolean,
  "summary": "string (1-2 sentences)",
  "reasoning": "Brief explanation of score"
}}"""


class CandidateScorer:
    def __init__(self, model: BaseModel, *, newsletter_name: str = "Jumble") -> None:
        self._model = model
        self._newsletter_name = newsletter_name

    async def score(self, candidate: Candidate) -> ScoredCandidate:
        """Score one candidate. Raises ValueError when the judge reply is unusable."""
        response = await self._model.generate(
            ModelRequest.from_prompt(
                SCORING_PROMPT.format(
                    newsletter_name=self._newsletter_name,
                    title=candidate.title,
                    snippet=candidate.snippet,
                    source=candidate.source,
                ),
                temperature=0.2,
                max_output_tokens=600,
                response_format="json_object",
            )
        )
        data = extract_json_object(response.text)
        if data is None or "relevanceScore" not in data:
            raise ValueError(f"Unusable scoring reply: {response.text[:200]!r}")

        score = max(0, min(100, round(float(data["relevanceScore"]))))
        return ScoredCandidate(
            **candidate.model_dump(),
            summary=str(data.get("summary") or candidate.snippet),
            relevance_score=score,
            is_roundup=bool(data.get("isRoundup", False)),
            reasoning=str(data.get("reasoning") or ""),
        )

    async def score_and_summarize(self, candidates: list[Candidate]) -> list[ScoredCandidate]:
        """Score each candidate; failures are skipped, roundups dropped, best first."""
        scored: list[ScoredCandidate] = []
        for candidate in candidates:
            try:
                result = await self.score(candidate)
            except Exception as e:
                logger.warning("Failed to score candidate '%s': %s", candidate.title, e)
                continue

            if result.is_roundup:
                logger.info("Rejected roundup: '%s'", candidate.title)
                continue

            logger.info("Scored: '%s' = %s/100", candidate.title, result.relevance_score)
            scored.append(result)

        return sorted(scored, key=lambda c: c.relevance_score, reverse=True)


__all__ = ["SCORING_PROMPT", "CandidateScorer"]
