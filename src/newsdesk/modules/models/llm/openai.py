"""OpenAI LLM provider (OpenAI API).

Thin adapter from the `BaseModel` contract to `langchain-openai`'s
`ChatOpenAI`. The provider finish reason is normalized so callers can detect
truncated drafts.
"""

from __future__ import annotations

import logging

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from newsdesk.core import Config
from newsdesk.core.exceptions import ConfigurationError

from ..base import BaseModel
from ..registry import model_registry
from ..types import (
    ModelQuotaExhaustedError,
    ModelRateLimitError,
    ModelRequest,
    ModelResponse,
    ModelTimeoutError,
    ProviderInfo,
    UsageStats,
    map_finish_reason,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1"


def build_messages(request: ModelRequest) -> list[BaseMessage]:
    messages: list[BaseMessage] = []
    if request.system:
        messages.append(SystemMessage(content=request.system))
    messages.append(HumanMessage(content=request.user_text()))
    return messages


def raise_for_provider_error(e: Exception, provider_info: ProviderInfo) -> None:
    """Map OpenAI-compatible SDK errors onto the model error hierarchy."""
    error_str = str(e).lower()
    name = type(e).__name__.lower()
    if "insufficient_quota" in error_str or "billing" in error_str:
        raise ModelQuotaExhaustedError(
            f"{provider_info.provider} quota exhausted: {e}", provider_info=provider_info
        ) from e
    if "rate_limit" in error_str or "too many requests" in error_str or "ratelimit" in name:
        raise ModelRateLimitError(
            f"{provider_info.provider} rate limited: {e}", provider_info=provider_info
        ) from e
    if "timeout" in name or "timed out" in error_str:
        raise ModelTimeoutError(
            f"{provider_info.provider} timed out: {e}", provider_info=provider_info
        ) from e


@model_registry.register_llm("openai", "*")
class OpenAILLM(BaseModel):
    """OpenAI chat completions provider.

    Args:
        config: Newsdesk configuration
        model_name: OpenAI model name (e.g., "gpt-4.1", "gpt-4.1-mini")
        **kwargs: Additional LangChain ChatOpenAI kwargs
    """

    def __init__(self, config: Config, *, model_name: str | None = None, **kwargs: object) -> None:
        if not config.openai.api_key:
            raise ConfigurationError("OPENAI_API_KEY is required for OpenAI models")
        self._cfg = config
        self._model_name = (model_name or DEFAULT_MODEL).strip() or DEFAULT_MODEL
        self._langchain_model = ChatOpenAI(
            model=self._model_name,
            api_key=config.openai.api_key,
            organization=config.openai.organization,
            base_url=config.openai.base_url,
            max_retries=0,
            **kwargs,
        )
        self._provider_info = ProviderInfo(
            provider="openai",
            model_name=self._model_name,
            model_key=f"openai/{self._model_name}",
        )

    async def generate(self, request: ModelRequest) -> ModelResponse:
        bind_kwargs: dict = {
            "timeout": request.timeout_sec,
            "max_tokens": request.max_output_tokens,
            "temperature": request.temperature,
        }
        if request.response_format == "json_object":
            bind_kwargs["response_format"] = {"type": "json_object"}

        model = self._langchain_model.bind(**bind_kwargs)
        try:
            msg = await model.ainvoke(build_messages(request))
        except Exception as e:
            raise_for_provider_error(e, self._provider_info)
            raise

        text = getattr(msg, "content", "")
        if isinstance(text, list):
            text = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block) for block in text
            )
        if not text:
            logger.warning("OpenAI returned empty content (model=%s)", self._model_name)

        meta = getattr(msg, "response_metadata", None) or {}
        return ModelResponse(
            text=str(text or ""),
            finish_reason=map_finish_reason(meta.get("finish_reason")),
            usage=self._extract_usage(msg),
            raw_provider=self._provider_info,
        )

    def _extract_usage(self, msg: object) -> UsageStats | None:
        um = getattr(msg, "usage_metadata", None)
        if isinstance(um, dict) and um.get("input_tokens") is not None:
            return UsageStats(
                input_tokens=int(um.get("input_tokens") or 0),
                output_tokens=int(um.get("output_tokens") or 0),
                total_tokens=int(um.get("total_tokens") or 0),
            )
        return None


__all__ = ["OpenAILLM", "build_messages", "raise_for_provider_error"]
