"""Application services over the store."""

from __future__ import annotations

from .drafts import DraftService, document_title

__all__ = ["DraftService", "document_title"]
