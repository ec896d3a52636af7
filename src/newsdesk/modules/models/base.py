"""Base interfaces for model providers (completion + embeddings)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .types import ModelRequest, ModelResponse


class BaseModel(ABC):
    """Completion model interface.

    Providers must implement `generate()`. `finish_reason` on the response is
    inspected by callers to detect truncation.
    """

    @abstractmethod
    async def generate(self, request: ModelRequest) -> ModelResponse:
        """Generate a response from the model."""
        raise NotImplementedError

    def get_token_count(self, text: str) -> int:
        """Count tokens in text.

        Default implementation uses word splitting as a rough approximation.
        """
        if not text:
            return 0
        return max(1, len(text.split()))


class BaseEmbeddings(ABC):
    """Vectorization model interface."""

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]:
        raise NotImplementedError

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_query(t) for t in texts]


__all__ = ["BaseModel", "BaseEmbeddings"]
