"""Image generation contract."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseImageGenerator(ABC):
    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return a publicly reachable URL for an image matching `prompt`."""
        raise NotImplementedError


__all__ = ["BaseImageGenerator"]
