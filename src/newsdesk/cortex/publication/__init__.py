"""Publication orchestrator: fact-check, draft, comply, illustrate, publish."""

from __future__ import annotations

from .illustrator import HeroImage, Illustrator
from .investigator import FactChecker
from .pipeline import PublicationPipeline, ResolvedContent

__all__ = ["FactChecker", "HeroImage", "Illustrator", "PublicationPipeline", "ResolvedContent"]
