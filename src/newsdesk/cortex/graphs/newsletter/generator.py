"""DraftGenerator: IssueContent -> newsletter markdown with warnings."""

from __future__ import annotations

import logging

from newsdesk.core.config import DraftConfig
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.research.base import BaseResearcher

from .builder import build_newsletter_graph
from .types import DraftOutcome, IssueContent, UrlBank

logger = logging.getLogger(__name__)


class DraftGenerator:
    """Runs the draft graph for one issue.

    Always returns a draft; only research failures (`ResearchError`) and
    completion-service exceptions escape.
    """

    def __init__(
        self,
        *,
        researcher: BaseResearcher,
        model: BaseModel,
        config: DraftConfig | None = None,
    ) -> None:
        self._config = config or DraftConfig()
        self._graph = build_newsletter_graph(
            researcher=researcher, model=model, config=self._config
        )

    async def generate(self, content: IssueContent, issue_number: int) -> DraftOutcome:
        logger.info("Generating draft for issue #%s", issue_number)
        state = await self._graph.ainvoke(
            {"content": content, "issue_number": issue_number, "attempt": 0, "warnings": []}
        )
        outcome = DraftOutcome(
            markdown=state.get("markdown", ""),
            warnings=list(state.get("warnings", [])),
            attempts=state.get("attempt", 0),
            url_bank=state.get("url_bank") or UrlBank(),
        )
        logger.info(
            "Draft ready after %s attempts (%s warnings)", outcome.attempts, len(outcome.warnings)
        )
        return outcome


__all__ = ["DraftGenerator"]
