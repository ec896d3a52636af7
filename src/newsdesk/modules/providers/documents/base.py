"""Document publishing contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from newsdesk.modules.markdown import DocumentLayout


class BaseDocumentPublisher(ABC):
    @abstractmethod
    async def publish(
        self,
        markdown: str,
        layout: DocumentLayout,
        *,
        title: str,
        image_url: str | None = None,
    ) -> str:
        """Create the hosted document and return its URL. Raises PublishError."""
        raise NotImplementedError


__all__ = ["BaseDocumentPublisher"]
