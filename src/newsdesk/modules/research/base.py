"""Contracts for grounded search and citation-backed research."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field


class SearchHit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    url: str
    snippet: str = ""


class ResearchResult(BaseModel):
    answer: str
    citations: list[str] = Field(default_factory=list)


class BaseSearch(ABC):
    """Grounded search: query -> recent articles with real URLs."""

    @abstractmethod
    async def search(self, query: str) -> list[SearchHit]:
        raise NotImplementedError


class BaseResearcher(ABC):
    """Research a prompt and return the answer with the URLs backing it."""

    @abstractmethod
    async def research(self, prompt: str) -> ResearchResult:
        raise NotImplementedError


__all__ = ["SearchHit", "ResearchResult", "BaseSearch", "BaseResearcher"]
