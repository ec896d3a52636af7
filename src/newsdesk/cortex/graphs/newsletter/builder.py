"""Builder for the newsletter draft graph.

    research -> draft -> validate -> draft   (incomplete, attempts left)
                                  -> rewrite (story word counts out of range) -> END
                                  -> END

Research failures propagate; everything after research degrades to warnings.
"""

from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from newsdesk.core.config import DraftConfig
from newsdesk.modules.models.base import BaseModel
from newsdesk.modules.research.base import BaseResearcher

from .nodes import make_draft_node, make_research_node, make_rewrite_node, make_validate_node
from .state import NewsletterState

logger = logging.getLogger(__name__)


def after_validate(state: NewsletterState) -> str:
    if not state.get("done_drafting"):
        return "draft"
    if state.get("rewrite_needed"):
        return "rewrite"
    return END


def build_newsletter_graph(
    *, researcher: BaseResearcher, model: BaseModel, config: DraftConfig
) -> Any:
    logger.debug(
        "Building newsletter graph: retries=%d, words=%d-%d",
        config.max_retries,
        config.min_words,
        config.max_words,
    )
    workflow = StateGraph(NewsletterState)

    workflow.add_node("research", make_research_node(researcher=researcher, config=config))
    workflow.add_node("draft", make_draft_node(model=model, config=config))
    workflow.add_node("validate", make_validate_node(config=config))
    workflow.add_node("rewrite", make_rewrite_node(model=model, config=config))

    workflow.set_entry_point("research")
    workflow.add_edge("research", "draft")
    workflow.add_edge("draft", "validate")
    workflow.add_conditional_edges(
        "validate", after_validate, {"draft": "draft", "rewrite": "rewrite", END: END}
    )
    workflow.add_edge("rewrite", END)

    return workflow.compile()


__all__ = ["after_validate", "build_newsletter_graph"]
