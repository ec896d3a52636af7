"""Model layer (LLM + embeddings) decoupled from the pipeline."""

from __future__ import annotations

from .base import BaseEmbeddings, BaseModel
from .registry import ModelRegistry, model_registry
from .types import ModelRequest, ModelResponse, TextPart

__all__ = [
    "BaseModel",
    "BaseEmbeddings",
    "ModelRegistry",
    "model_registry",
    "ModelRequest",
    "ModelResponse",
    "TextPart",
]
