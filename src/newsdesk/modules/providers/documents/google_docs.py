"""Google Docs publisher.

Authenticates with a service account (google-auth) and talks to the Docs and
Drive REST APIs over httpx. Text is inserted in one request, then formatting
ranges from the markdown AST are applied in a second batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from newsdesk.core.config import GoogleDocsConfig
from newsdesk.core.exceptions import ConfigurationError, PublishError
from newsdesk.modules.markdown import DocumentLayout

from .base import BaseDocumentPublisher

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive",
]
DOCS_API = "https://docs.googleapis.com/v1/documents"
DRIVE_API = "https://www.googleapis.com/drive/v3/files"

# Docs body content starts at index 1
BODY_START = 1


def document_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


def build_format_requests(layout: DocumentLayout, *, base: int = BODY_START) -> list[dict]:
    """Translate layout ranges into Docs batchUpdate requests."""
    requests: list[dict[str, Any]] = []
    for r in layout.ranges:
        rng = {"startIndex": r.start + base, "endIndex": r.end + base}
        if r.kind == "heading":
            requests.append(
                {
                    "updateParagraphStyle": {
                        "range": rng,
                        "paragraphStyle": {"namedStyleType": f"HEADING_{min(r.level or 1, 6)}"},
                        "fields": "namedStyleType",
                    }
                }
            )
        elif r.kind in ("bold", "italic"):
            requests.append(
                {
                    "updateTextStyle": {
                        "range": rng,
                        "textStyle": {r.kind: True},
                        "fields": r.kind,
                    }
                }
            )
        elif r.kind == "link":
            requests.append(
                {
                    "updateTextStyle": {
                        "range": rng,
                        "textStyle": {"link": {"url": r.url}},
                        "fields": "link",
                    }
                }
            )
        elif r.kind == "bullet":
            requests.append(
                {
                    "createParagraphBullets": {
                        "range": rng,
                        "bulletPreset": "BULLET_DISC_CIRCLE_SQUARE",
                    }
                }
            )
    return requests


class GoogleDocsPublisher(BaseDocumentPublisher):
    def __init__(
        self,
        config: GoogleDocsConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        credentials: Any = None,
    ) -> None:
        if credentials is None:
            if not config.service_account_email or not config.private_key:
                raise ConfigurationError(
                    "Google service account credentials not configured. "
                    "Set GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY."
                )
            credentials = service_account.Credentials.from_service_account_info(
                {
                    "type": "service_account",
                    "client_email": config.service_account_email,
                    "private_key": config.private_key,
                    "token_uri": "https://oauth2.googleapis.com/token",
                },
                scopes=SCOPES,
            )
        self._cfg = config
        self._credentials = credentials
        self._transport = transport

    async def _token(self) -> str:
        if not self._credentials.valid:
            await asyncio.to_thread(self._credentials.refresh, Request())
        return str(self._credentials.token)

    async def publish(
        self,
        markdown: str,
        layout: DocumentLayout,
        *,
        title: str,
        image_url: str | None = None,
    ) -> str:
        logger.info("Creating document '%s' (%s chars)", title, len(layout.text))
        try:
            headers = {"Authorization": f"Bearer {await self._token()}"}
            async with httpx.AsyncClient(
                transport=self._transport, headers=headers, timeout=self._cfg.timeout_sec
            ) as client:
                resp = await client.post(DOCS_API, json={"title": title})
                resp.raise_for_status()
                document_id = resp.json()["documentId"]
                logger.info("Created document: %s", document_id)

                await self._batch_update(
                    client,
                    document_id,
                    [{"insertText": {"location": {"index": BODY_START}, "text": layout.text}}],
                )
                format_requests = build_format_requests(layout)
                if format_requests:
                    await self._batch_update(client, document_id, format_requests)

                if image_url:
                    await self._insert_image(client, document_id, image_url)
                if self._cfg.editor_email:
                    await self._share(client, document_id, self._cfg.editor_email)
                if self._cfg.folder_id:
                    await self._move_to_folder(client, document_id, self._cfg.folder_id)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            raise PublishError(f"Failed to create Google Doc: {e}") from e

        url = document_url(document_id)
        logger.info("Newsletter document created: %s", url)
        return url

    async def _batch_update(
        self, client: httpx.AsyncClient, document_id: str, requests: list[dict]
    ) -> None:
        resp = await client.post(
            f"{DOCS_API}/{document_id}:batchUpdate", json={"requests": requests}
        )
        resp.raise_for_status()

    async def _insert_image(self, client: httpx.AsyncClient, document_id: str, url: str) -> None:
        request = {
            "insertInlineImage": {
                "location": {"index": BODY_START},
                "uri": url,
                "objectSize": {
                    "height": {"magnitude": 300, "unit": "PT"},
                    "width": {"magnitude": 500, "unit": "PT"},
                },
            }
        }
        try:
            await self._batch_update(client, document_id, [request])
            logger.info("Hero image inserted")
        except httpx.HTTPError as e:
            logger.warning("Failed to insert image: %s", e)

    async def _share(self, client: httpx.AsyncClient, document_id: str, email: str) -> None:
        try:
            resp = await client.post(
                f"{DRIVE_API}/{document_id}/permissions",
                params={"fields": "id"},
                json={"type": "user", "role": "writer", "emailAddress": email},
            )
            resp.raise_for_status()
            logger.info("Shared document with %s", email)
        except httpx.HTTPError as e:
            logger.warning("Failed to share document: %s", e)

    async def _move_to_folder(
        self, client: httpx.AsyncClient, document_id: str, folder_id: str
    ) -> None:
        try:
            resp = await client.patch(
                f"{DRIVE_API}/{document_id}",
                params={"addParents": folder_id, "fields": "id, parents"},
            )
            resp.raise_for_status()
            logger.info("Moved document to folder %s", folder_id)
        except httpx.HTTPError as e:
            logger.warning("Failed to move document: %s", e)


__all__ = ["GoogleDocsPublisher", "build_format_requests", "document_url"]
