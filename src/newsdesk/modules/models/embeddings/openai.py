"""OpenAI embeddings provider.

Vectors are requested with a fixed `dimensions` so they match the history
index for its whole lifetime.
"""

from __future__ import annotations

from langchain_openai import OpenAIEmbeddings as _LCOpenAIEmbeddings

from newsdesk.core.config import Config
from newsdesk.core.exceptions import ConfigurationError

from ..base import BaseEmbeddings
from ..registry import model_registry

DEFAULT_MODEL = "text-embedding-3-small"


@model_registry.register_embeddings("openai", "*")
class OpenAIEmbeddings(BaseEmbeddings):
    def __init__(
        self,
        config: Config,
        *,
        model_name: str | None = None,
        dimensions: int | None = None,
    ) -> None:
        if not config.openai.api_key:
            raise ConfigurationError("OPENAI_API_KEY is required for OpenAI embeddings")
        self._model_name = model_name or DEFAULT_MODEL
        self.dimensions = dimensions or config.models.embedding_dim
        self._client = _LCOpenAIEmbeddings(
            model=self._model_name,
            dimensions=self.dimensions,
            api_key=config.openai.api_key,
            organization=config.openai.organization,
            base_url=config.openai.base_url,
            max_retries=0,
        )

    async def embed_query(self, text: str) -> list[float]:
        return await self._client.aembed_query(text)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return await self._client.aembed_documents(texts)


__all__ = ["OpenAIEmbeddings"]
