"""Domain records shared by discovery, drafting and publication."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Candidate(BaseModel):
    """Raw, unscored discovery hit."""

    model_config = ConfigDict(extra="ignore")

    title: str
    url: str
    snippet: str = ""
    source: str = ""


class ScoredCandidate(Candidate):
    summary: str = ""
    relevance_score: int = Field(default=0, ge=0, le=100)
    is_roundup: bool = False
    reasoning: str = ""


FactCheckStatus = Literal["pending", "verified", "warning", "failed"]


class Lead(BaseModel):
    """Persisted, deduplicated, above-threshold story."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    title: str
    source: str = ""
    url: str
    summary: str = ""
    relevance_score: int = 0
    embedding: list[float] | None = None
    fact_check_status: FactCheckStatus = "pending"
    primary_source_url: str | None = None
    note: str | None = None
    is_manual: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Challenge(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    title: str
    description: str
    type: str = "general"
    created_at: datetime = Field(default_factory=utcnow)


class Issue(BaseModel):
    """One newsletter edition; references leads/challenges by id."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    issue_number: int
    main_story_id: int | None = None
    secondary_story_id: int | None = None
    challenge_id: int | None = None
    quick_link_ids: list[int] = Field(default_factory=list)
    document_url: str | None = None
    published_at: datetime | None = None


DraftStatus = Literal["draft", "published", "archived"]


class Draft(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    issue_id: int | None = None
    issue_number: int
    content: str = ""
    status: DraftStatus = "draft"
    document_url: str | None = None
    hero_image_url: str | None = None
    hero_image_prompt: str | None = None
    published_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class DraftVersion(BaseModel):
    """Immutable snapshot taken on each publish."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | None = None
    draft_id: int
    content: str
    version_number: int
    created_at: datetime = Field(default_factory=utcnow)


class HistoryEntry(BaseModel):
    """Row of the dedup history index."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    url: str
    title: str
    embedding: list[float] | None = None
    published_at: datetime = Field(default_factory=utcnow)


class ValidationResult(BaseModel):
    valid: bool
    violations: list[str] = Field(default_factory=list)


MatchType = Literal["exact_url", "semantic_similarity"]


class DuplicateCheck(BaseModel):
    is_duplicate: bool
    match_type: MatchType | None = None
    matched_title: str | None = None
    similarity: float | None = None


class FactCheckResult(BaseModel):
    status: Literal["verified", "warning", "failed"]
    url_live: bool = False
    primary_source_url: str | None = None
    issues: list[str] = Field(default_factory=list)


class PublicationResult(BaseModel):
    success: bool
    document_url: str | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    duration_sec: float = 0.0


__all__ = [
    "utcnow",
    "Candidate",
    "ScoredCandidate",
    "FactCheckStatus",
    "Lead",
    "Challenge",
    "Issue",
    "DraftStatus",
    "Draft",
    "DraftVersion",
    "HistoryEntry",
    "ValidationResult",
    "MatchType",
    "DuplicateCheck",
    "FactCheckResult",
    "PublicationResult",
]
