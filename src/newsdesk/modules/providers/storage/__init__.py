"""Persistence providers."""

from __future__ import annotations

from .base import BaseStore
from .memory import InMemoryStore

__all__ = ["BaseStore", "InMemoryStore"]
