"""Request/response contracts for completion and embedding providers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel as PydanticModel
from pydantic import ConfigDict, Field

from newsdesk.core.exceptions import (
    ModelError,
    ModelQuotaExhaustedError,
    ModelRateLimitError,
    ModelTimeoutError,
)

FinishReason = Literal["stop", "max_tokens", "safety", "other"]


class TextPart(PydanticModel):
    type: Literal["text"] = "text"
    text: str


class ModelRequest(PydanticModel):
    """Provider-agnostic completion request."""

    model_config = ConfigDict(extra="ignore")

    system: str | None = None
    parts: list[TextPart] = Field(default_factory=list)
    temperature: float = 0.2
    max_output_tokens: int = 2048
    timeout_sec: float = 120.0
    # "json_object" asks providers that support it for strict JSON
    response_format: Literal["text", "json_object"] = "text"

    @classmethod
    def from_prompt(cls, prompt: str, **kwargs: object) -> "ModelRequest":
        return cls(parts=[TextPart(text=prompt)], **kwargs)

    def user_text(self) -> str:
        return "".join(p.text for p in self.parts)


class UsageStats(PydanticModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class ProviderInfo(PydanticModel):
    provider: str
    model_name: str
    model_key: str


class ModelResponse(PydanticModel):
    text: str = ""
    finish_reason: FinishReason = "stop"
    # Search-grounded providers return the URLs backing the answer
    citations: list[str] = Field(default_factory=list)
    usage: UsageStats | None = None
    raw_provider: ProviderInfo | None = None


def map_finish_reason(raw: str | None) -> FinishReason:
    """Normalize provider finish reasons (OpenAI-compatible names)."""
    if raw is None:
        return "stop"
    value = str(raw).lower()
    if value in {"stop", "end_turn", "stop_sequence"}:
        return "stop"
    if value in {"length", "max_tokens"}:
        return "max_tokens"
    if value in {"content_filter", "safety"}:
        return "safety"
    return "other"


__all__ = [
    "FinishReason",
    "TextPart",
    "ModelRequest",
    "UsageStats",
    "ProviderInfo",
    "ModelResponse",
    "map_finish_reason",
    "ModelError",
    "ModelRateLimitError",
    "ModelQuotaExhaustedError",
    "ModelTimeoutError",
]
