"""Document publishing providers."""

from __future__ import annotations

from .base import BaseDocumentPublisher

__all__ = ["BaseDocumentPublisher"]
