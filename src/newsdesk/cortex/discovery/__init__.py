"""Dedup & scoring engine: raw search hits -> deduplicated, scored leads."""

from __future__ import annotations

from .dedup import SIMILARITY_THRESHOLD, DedupEngine
from .hunter import DiscoveryReport, ScoopHunter
from .roundup import is_roundup_by_title
from .scoring import CandidateScorer

__all__ = [
    "SIMILARITY_THRESHOLD",
    "DedupEngine",
    "CandidateScorer",
    "DiscoveryReport",
    "ScoopHunter",
    "is_roundup_by_title",
]
