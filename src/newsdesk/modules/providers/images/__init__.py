"""Image generation providers."""

from __future__ import annotations

from .base import BaseImageGenerator

__all__ = ["BaseImageGenerator"]
