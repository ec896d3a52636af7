"""Perplexity LLM provider (Perplexity Sonar API).

Perplexity answers with built-in web search and returns the citation URLs
backing the answer. Those citations feed the draft URL bank.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from newsdesk.core import Config
from newsdesk.core.exceptions import ConfigurationError

from ..base import BaseModel
from ..registry import model_registry
from ..types import (
    ModelRequest,
    ModelResponse,
    ProviderInfo,
    UsageStats,
    map_finish_reason,
)
from .openai import raise_for_provider_error

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "sonar"


@model_registry.register_llm("perplexity", "*")
class PerplexityLLM(BaseModel):
    """Perplexity LLM provider with built-in search.

    Supports:
    - Real-time web search
    - Citations and sources
    - Search recency filtering
    """

    def __init__(
        self,
        config: Config,
        *,
        model_name: str | None = None,
        search_recency_filter: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not config.perplexity.api_key:
            raise ConfigurationError("PERPLEXITY_API_KEY is required for Perplexity models")
        self._cfg = config
        self._model_name = (model_name or DEFAULT_MODEL).strip() or DEFAULT_MODEL
        self._search_recency_filter = (
            search_recency_filter
            if search_recency_filter is not None
            else config.perplexity.search_recency_filter
        )
        self._base_url = config.perplexity.base_url.rstrip("/")
        self._transport = transport
        self._provider_info = ProviderInfo(
            provider="perplexity",
            model_name=self._model_name,
            model_key=f"perplexity/{self._model_name}",
        )

    async def generate(self, request: ModelRequest) -> ModelResponse:
        payload: dict[str, Any] = {
            "model": self._model_name,
            "messages": self._build_messages(request),
            "temperature": request.temperature,
            "max_tokens": request.max_output_tokens,
            "return_citations": True,
        }
        if self._search_recency_filter:
            payload["search_recency_filter"] = self._search_recency_filter

        logger.debug(
            "Perplexity request: model=%s, recency=%s",
            self._model_name,
            self._search_recency_filter,
        )

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    f"{self._base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self._cfg.perplexity.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                    timeout=request.timeout_sec,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise_for_provider_error(e, self._provider_info)
            raise

        choice = (data.get("choices") or [{}])[0]
        content = choice.get("message", {}).get("content", "")
        citations = [str(c) for c in data.get("citations") or [] if c]
        if not citations:
            citations = [
                str(r.get("url"))
                for r in data.get("search_results") or []
                if isinstance(r, dict) and r.get("url")
            ]

        return ModelResponse(
            text=content or "",
            finish_reason=map_finish_reason(choice.get("finish_reason")),
            citations=citations,
            usage=self._extract_usage(data),
            raw_provider=self._provider_info,
        )

    def _build_messages(self, request: ModelRequest) -> list[dict[str, str]]:
        messages = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.append({"role": "user", "content": request.user_text()})
        return messages

    def _extract_usage(self, data: dict[str, Any]) -> UsageStats | None:
        usage = data.get("usage") or {}
        if not usage:
            return None
        return UsageStats(
            input_tokens=int(usage.get("prompt_tokens") or 0),
            output_tokens=int(usage.get("completion_tokens") or 0),
            total_tokens=int(usage.get("total_tokens") or 0),
        )


__all__ = ["PerplexityLLM"]
