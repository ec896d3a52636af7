"""Draft lifecycle: one editable draft per issue, immutable snapshots per publish."""

from __future__ import annotations

import logging

from newsdesk.core.config import Config
from newsdesk.core.exceptions import NotFoundError, PublishError, StorageError
from newsdesk.core.types import Draft, DraftVersion, utcnow
from newsdesk.modules.markdown import render_document
from newsdesk.modules.providers.documents.base import BaseDocumentPublisher
from newsdesk.modules.providers.storage.base import BaseStore

logger = logging.getLogger(__name__)


def document_title(config: Config, issue_number: int) -> str:
    return config.publication.document_title_template.format(
        newsletter_name=config.draft.newsletter_name, issue_number=issue_number
    )


class DraftService:
    def __init__(
        self,
        store: BaseStore,
        *,
        publisher: BaseDocumentPublisher | None = None,
        config: Config | None = None,
    ) -> None:
        self._store = store
        self._publisher = publisher
        self._config = config or Config()

    async def list_drafts(self) -> list[Draft]:
        return await self._store.list_drafts()

    async def get_draft(self, draft_id: int) -> Draft | None:
        return await self._store.get_draft(draft_id)

    async def get_draft_by_issue(self, issue_number: int) -> Draft | None:
        return await self._store.get_draft_by_issue(issue_number)

    async def create_draft(
        self, issue_number: int, content: str, *, issue_id: int | None = None
    ) -> Draft:
        if await self._store.get_draft_by_issue(issue_number) is not None:
            raise StorageError(f"Draft for issue {issue_number} already exists")
        return await self._store.create_draft(
            Draft(issue_number=issue_number, content=content, issue_id=issue_id)
        )

    async def update_draft(self, draft_id: int, content: str) -> Draft:
        return await self._store.update_draft(draft_id, content=content, updated_at=utcnow())

    async def _require(self, draft_id: int) -> Draft:
        draft = await self._store.get_draft(draft_id)
        if draft is None:
            raise NotFoundError(f"Draft {draft_id} not found")
        return draft

    async def _next_version_number(self, draft_id: int) -> int:
        versions = await self._store.list_versions(draft_id)
        return max((v.version_number for v in versions), default=0) + 1

    async def snapshot(self, draft: Draft) -> DraftVersion:
        if draft.id is None:
            raise StorageError("Cannot snapshot an unsaved draft")
        version = await self._store.create_version(
            DraftVersion(
                draft_id=draft.id,
                content=draft.content,
                version_number=await self._next_version_number(draft.id),
            )
        )
        logger.info("Saved version %s of draft %s", version.version_number, draft.id)
        return version

    async def publish(self, draft_id: int) -> Draft:
        """Publish the draft as a document, mark it published and snapshot it."""
        if self._publisher is None:
            raise PublishError("No document publisher configured")
        draft = await self._require(draft_id)
        logger.info("Publishing draft %s for issue %s", draft_id, draft.issue_number)

        url = await self._publisher.publish(
            draft.content,
            render_document(draft.content),
            title=document_title(self._config, draft.issue_number),
            image_url=draft.hero_image_url,
        )
        now = utcnow()
        updated = await self._store.update_draft(
            draft_id, status="published", document_url=url, published_at=now, updated_at=now
        )
        await self.snapshot(updated)
        return updated

    async def record_publication(
        self,
        *,
        issue_number: int,
        issue_id: int | None,
        content: str,
        document_url: str,
        hero_image_url: str | None = None,
        hero_image_prompt: str | None = None,
    ) -> Draft:
        """Save an already-published issue as its draft and snapshot it."""
        now = utcnow()
        existing = await self._store.get_draft_by_issue(issue_number)
        if existing is None:
            existing = await self.create_draft(issue_number, content, issue_id=issue_id)
        draft = await self._store.update_draft(
            existing.id,
            content=content,
            status="published",
            document_url=document_url,
            hero_image_url=hero_image_url,
            hero_image_prompt=hero_image_prompt,
            published_at=now,
            updated_at=now,
        )
        await self.snapshot(draft)
        return draft


__all__ = ["DraftService", "document_title"]
