"""Grounded search and research collaborators."""

from __future__ import annotations

from .base import BaseResearcher, BaseSearch, ResearchResult, SearchHit
from .llm import LLMGroundedSearch, LLMResearcher

__all__ = [
    "SearchHit",
    "ResearchResult",
    "BaseSearch",
    "BaseResearcher",
    "LLMGroundedSearch",
    "LLMResearcher",
]
