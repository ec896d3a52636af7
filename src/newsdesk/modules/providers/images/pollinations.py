"""Pollinations image generator: the prompt is encoded into the image URL."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlencode

import httpx

from newsdesk.core.config import ImagesConfig
from newsdesk.core.exceptions import ConfigurationError, PublishError

from .base import BaseImageGenerator

logger = logging.getLogger(__name__)


class PollinationsImageGenerator(BaseImageGenerator):
    def __init__(
        self, config: ImagesConfig, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        if not config.enabled:
            raise ConfigurationError("Image generation is disabled (images.enabled = false)")
        self._cfg = config
        self._transport = transport

    def build_url(self, prompt: str) -> str:
        params = urlencode(
            {"width": self._cfg.width, "height": self._cfg.height, "nologo": "true"}
        )
        return f"{self._cfg.base_url.rstrip('/')}/{quote(prompt.strip(), safe='')}?{params}"

    async def generate(self, prompt: str) -> str:
        url = self.build_url(prompt)
        # The first GET renders and caches the image behind this URL
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._cfg.timeout_sec, follow_redirects=True
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise PublishError(f"Image generation failed: {e}") from e

        content_type = resp.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise PublishError(f"Image generation returned {content_type or 'no content type'}")
        logger.info("Image generated: %s", url)
        return url


__all__ = ["PollinationsImageGenerator"]
