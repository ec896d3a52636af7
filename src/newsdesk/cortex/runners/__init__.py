"""Runners for long-lived loops."""

from __future__ import annotations

from .research import ChallengeGenerator, ResearchCycle

__all__ = ["ChallengeGenerator", "ResearchCycle"]
