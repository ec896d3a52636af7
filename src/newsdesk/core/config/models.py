"""Model and LLM configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelsConfig(BaseModel):
    """Which provider/model key serves each role.

    Keys use the registry format `provider/name` (e.g. `openai/gpt-4.1`).
    """

    # Accept both `default_llm` and canonical `default` from TOML/env.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    default_llm: str = Field(default="openai/gpt-4.1", alias="default")
    # Cheap JSON judge for scoring, fact-checks and image prompts
    judge_llm: str = "openai/gpt-4.1-mini"
    # Search-grounded models (citations come back with the answer)
    research_llm: str = "perplexity/sonar-pro"
    search_llm: str = "perplexity/sonar"

    default_embeddings: str = "openai/text-embedding-3-small"
    # Fixed for the lifetime of the history table
    embedding_dim: int = 768


class LLMConfig(BaseModel):
    """Provider-agnostic LLM request controls."""

    model_config = ConfigDict(extra="ignore")

    temperature: float = 0.2
    max_output_tokens: int = 2048
    timeout_sec: float = 120.0


__all__ = ["ModelsConfig", "LLMConfig"]
