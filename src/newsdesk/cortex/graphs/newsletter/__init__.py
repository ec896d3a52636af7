"""Newsletter draft graph: research -> draft -> validate -> retry/rewrite."""

from __future__ import annotations

from .builder import build_newsletter_graph
from .generator import DraftGenerator
from .types import ChallengeTopic, DraftOutcome, IssueContent, StoryTopic, UrlBank

__all__ = [
    "build_newsletter_graph",
    "DraftGenerator",
    "ChallengeTopic",
    "DraftOutcome",
    "IssueContent",
    "StoryTopic",
    "UrlBank",
]
