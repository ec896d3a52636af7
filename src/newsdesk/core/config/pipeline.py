"""Editorial pipeline knobs: discovery, drafting, compliance, publication."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SEARCH_QUERIES = [
    "latest AI breakthroughs and announcements this week",
    "new AI models and research papers released",
    "AI startup funding and company news",
    "AI product launches and updates",
    "AI regulation and policy news",
]


class DiscoveryConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    search_queries: list[str] = Field(default_factory=lambda: list(DEFAULT_SEARCH_QUERIES))
    # Leads are stored only at or above this score
    min_relevance_score: int = 70
    # Cosine similarity strictly above this is a semantic duplicate
    similarity_threshold: float = 0.85
    history_days_to_keep: int = 90
    interval_hours: int = 6
    challenges_per_week: int = 3


class DraftConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    newsletter_name: str = "Jumble"
    max_retries: int = 3
    base_temperature: float = 0.5
    temperature_step: float = 0.1
    max_output_tokens: int = 16384

    research_temperature: float = 0.3
    research_max_tokens: int = 4000

    digest_size: int = 6
    preview_bullets: int = 5

    # Story sections outside [min_words, max_words] get rewritten to ~target_words
    min_words: int = 325
    max_words: int = 400
    target_words: int = 350
    rewrite_temperature: float = 0.4


class ComplianceConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_attempts: int = 3
    fix_temperature: float = 0.5
    fix_max_tokens: int = 16384
    # Exhausted fixes abort publication unless explicitly overridden
    allow_publish_with_violations: bool = False


class PublicationConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    liveness_timeout_sec: float = 5.0
    document_title_template: str = "{newsletter_name} - Issue #{issue_number}"


__all__ = [
    "DEFAULT_SEARCH_QUERIES",
    "DiscoveryConfig",
    "DraftConfig",
    "ComplianceConfig",
    "PublicationConfig",
]
