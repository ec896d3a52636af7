"""Tests for DraftService: one draft per issue, versioned on publish."""

from __future__ import annotations

import pytest


class TestDraftService:
    @pytest.mark.asyncio
    async def test_create_and_lookup(self, store):
        from newsdesk.cortex.services import DraftService

        service = DraftService(store)

        draft = await service.create_draft(7, "# Draft")

        assert draft.id is not None
        assert draft.status == "draft"
        assert (await service.get_draft(draft.id)).content == "# Draft"
        assert (await service.get_draft_by_issue(7)).id == draft.id
        assert [d.id for d in await service.list_drafts()] == [draft.id]

    @pytest.mark.asyncio
    async def test_one_draft_per_issue(self, store):
        from newsdesk.core.exceptions import StorageError
        from newsdesk.cortex.services import DraftService

        service = DraftService(store)
        await service.create_draft(7, "# Draft")

        with pytest.raises(StorageError):
            await service.create_draft(7, "# Another")

    @pytest.mark.asyncio
    async def test_update_draft(self, store):
        from newsdesk.cortex.services import DraftService

        service = DraftService(store)
        draft = await service.create_draft(7, "# Draft")

        updated = await service.update_draft(draft.id, "# Edited")

        assert updated.content == "# Edited"
        assert updated.updated_at >= draft.updated_at

    @pytest.mark.asyncio
    async def test_publish_marks_published_and_snapshots(self, store, publisher):
        from newsdesk.cortex.services import DraftService

        service = DraftService(store, publisher=publisher)
        draft = await service.create_draft(7, "# 🚀 Story\n\nBody **bold** text.")

        published = await service.publish(draft.id)

        assert published.status == "published"
        assert published.document_url == "https://docs.example.com/d/doc-1"
        assert published.published_at is not None
        assert publisher.calls[0]["title"] == "Jumble - Issue #7"
        assert publisher.calls[0]["layout"].of_kind("bold")
        versions = await store.list_versions(draft.id)
        assert [(v.version_number, v.content) for v in versions] == [(1, draft.content)]

    @pytest.mark.asyncio
    async def test_republish_increments_version(self, store, publisher):
        from newsdesk.cortex.services import DraftService

        service = DraftService(store, publisher=publisher)
        draft = await service.create_draft(7, "# One")
        await service.publish(draft.id)
        await service.update_draft(draft.id, "# Two")

        await service.publish(draft.id)

        versions = await store.list_versions(draft.id)
        # Newest first
        assert [(v.version_number, v.content) for v in versions] == [(2, "# Two"), (1, "# One")]

    @pytest.mark.asyncio
    async def test_publish_without_publisher(self, store):
        from newsdesk.core.exceptions import PublishError
        from newsdesk.cortex.services import DraftService

        service = DraftService(store)
        draft = await service.create_draft(7, "# Draft")

        with pytest.raises(PublishError):
            await service.publish(draft.id)

    @pytest.mark.asyncio
    async def test_publish_missing_draft(self, store, publisher):
        from newsdesk.core.exceptions import NotFoundError
        from newsdesk.cortex.services import DraftService

        with pytest.raises(NotFoundError):
            await DraftService(store, publisher=publisher).publish(99)

    @pytest.mark.asyncio
    async def test_publisher_error_leaves_draft_unpublished(self, store, fakes):
        from newsdesk.core.exceptions import PublishError
        from newsdesk.cortex.services import DraftService

        service = DraftService(store, publisher=fakes.Publisher(error=PublishError("quota")))
        draft = await service.create_draft(7, "# Draft")

        with pytest.raises(PublishError):
            await service.publish(draft.id)

        assert (await service.get_draft(draft.id)).status == "draft"
        assert await store.list_versions(draft.id) == []

    @pytest.mark.asyncio
    async def test_record_publication_reuses_existing_draft(self, store):
        from newsdesk.cortex.services import DraftService

        service = DraftService(store)
        existing = await service.create_draft(7, "# Old", issue_id=3)

        draft = await service.record_publication(
            issue_number=7,
            issue_id=3,
            content="# Final",
            document_url="https://docs.example.com/d/1",
            hero_image_url="https://images.example.com/1.png",
            hero_image_prompt="A chip.",
        )

        assert draft.id == existing.id
        assert draft.content == "# Final"
        assert draft.status == "published"
        assert draft.hero_image_url == "https://images.example.com/1.png"
        assert len(await store.list_versions(draft.id)) == 1

    @pytest.mark.asyncio
    async def test_snapshot_requires_saved_draft(self, store):
        from newsdesk.core.exceptions import StorageError
        from newsdesk.core.types import Draft
        from newsdesk.cortex.services import DraftService

        with pytest.raises(StorageError):
            await DraftService(store).snapshot(Draft(issue_number=1))


class TestDocumentTitle:
    def test_uses_template(self):
        from newsdesk.core.config import Config
        from newsdesk.cortex.services import document_title

        config = Config()
        config.draft.newsletter_name = "Signal"

        assert document_title(config, 42) == "Signal - Issue #42"
