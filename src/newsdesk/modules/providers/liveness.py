"""URL liveness probe used by the fact-check phase."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class UrlProbe:
    """HEAD request with a short timeout; any failure means not live."""

    def __init__(
        self, *, timeout_sec: float = 5.0, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self._timeout = timeout_sec
        self._transport = transport

    async def is_live(self, url: str) -> bool:
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout, follow_redirects=True
            ) as client:
                resp = await client.head(url)
                return resp.is_success
        except httpx.HTTPError as e:
            logger.info("URL check failed for %s: %s", url, e)
            return False


__all__ = ["UrlProbe"]
