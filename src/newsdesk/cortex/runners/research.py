"""Research cycle: discovery every run, challenge generation on Mondays."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Callable, Literal

from pydantic import ValidationError

from newsdesk.core.types import Challenge
from newsdesk.cortex.discovery import DiscoveryReport, ScoopHunter
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.models.types import ModelRequest
from newsdesk.modules.providers.storage.base import BaseStore
from newsdesk.utils.json_parser import extract_json_array

logger = logging.getLogger(__name__)

CycleMode = Literal["standard", "deep-dive"]

CHALLENGE_PROMPT = """Generate {count} creative AI/ML coding challenges for a weekly newsletter.

REQUIREMENTS:
- Beginner to intermediate difficulty
- Solvable in 30-60 minutes
- Related to current AI/ML concepts or recent news
- Fun, educational and practical, with clear learning outcomes

Each challenge should have:
- Catchy title (under 60 chars)
- Clear description (150-200 words)
- Type: "code", "prompt_engineering", "data_analysis" or "model_training"

Return as JSON array:
[
  {{
    "title": "Challenge title",
    "description": "Full description with clear steps",
    "type": "challenge_type"
  }}
]"""


class ChallengeGenerator:
    def __init__(self, model: BaseModel, store: BaseStore, *, count: int = 3) -> None:
        self._model = model
        self._store = store
        self._count = count

    async def run(self) -> list[Challenge]:
        logger.info("Creating weekly challenges")
        response = await self._model.generate(
            ModelRequest.from_prompt(
                CHALLENGE_PROMPT.format(count=self._count),
                temperature=0.8,
                max_output_tokens=3000,
            )
        )

        created: list[Challenge] = []
        for item in extract_json_array(response.text)[: self._count]:
            if not isinstance(item, dict):
                continue
            try:
                challenge = Challenge.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping malformed challenge: %s", e)
                continue
            created.append(await self._store.create_challenge(challenge))
            logger.info("Created challenge: %s", challenge.title)

        logger.info("Generated %s new challenges", len(created))
        return created


class ResearchCycle:
    """One discovery cycle at a time per instance.

    The running flag is a plain attribute, not a lock: it only prevents the same
    instance from overlapping with itself.
    """

    def __init__(
        self,
        hunter: ScoopHunter,
        challenges: ChallengeGenerator | None = None,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._hunter = hunter
        self._challenges = challenges
        self._today = today
        self.is_running = False

    def should_generate_challenges(self) -> bool:
        return self._today().weekday() == 0

    async def run(
        self, mode: CycleMode = "standard", *, force_challenges: bool = False
    ) -> DiscoveryReport | None:
        """Returns the discovery report, or None when skipped or failed."""
        if self.is_running:
            logger.info("Research cycle already running, skipping")
            return None

        self.is_running = True
        start = time.monotonic()
        logger.info("━━━ Starting research cycle (%s) ━━━", mode)
        try:
            logger.info("Phase 1: Searching for news...")
            report = await self._hunter.run()

            if self._challenges and (force_challenges or self.should_generate_challenges()):
                logger.info("Phase 2: Generating weekly challenges...")
                await self._challenges.run()
            else:
                logger.info("Skipping challenge generation (not Monday)")

            logger.info("✓ Research cycle complete (%.1fs)", time.monotonic() - start)
            return report
        except Exception as e:
            logger.error("✗ Research cycle failed: %s", e)
            return None
        finally:
            self.is_running = False


__all__ = ["CHALLENGE_PROMPT", "ChallengeGenerator", "ResearchCycle"]
