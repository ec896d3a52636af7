"""Tests for the research cycle runner and weekly challenge generation."""

from __future__ import annotations

import asyncio
import json
from datetime import date

import pytest

MONDAY = date(2026, 10, 12)
TUESDAY = date(2026, 10, 13)


class FakeHunter:
    def __init__(self, *, error: Exception | None = None, gate: asyncio.Event | None = None):
        self.error = error
        self.gate = gate
        self.runs = 0

    async def run(self, queries=None):
        from newsdesk.cortex.discovery import DiscoveryReport

        self.runs += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return DiscoveryReport(searched=3, stored=1)


class FakeChallenges:
    def __init__(self):
        self.runs = 0

    async def run(self):
        self.runs += 1
        return []


# ---------------------------------------------------------------------------
# ResearchCycle
# ---------------------------------------------------------------------------


class TestResearchCycle:
    @pytest.mark.asyncio
    async def test_returns_discovery_report(self):
        from newsdesk.cortex.runners import ResearchCycle

        cycle = ResearchCycle(FakeHunter(), FakeChallenges(), today=lambda: TUESDAY)

        report = await cycle.run()

        assert report.stored == 1
        assert cycle.is_running is False

    @pytest.mark.asyncio
    async def test_challenges_only_on_monday(self):
        from newsdesk.cortex.runners import ResearchCycle

        challenges = FakeChallenges()
        await ResearchCycle(FakeHunter(), challenges, today=lambda: TUESDAY).run()
        assert challenges.runs == 0

        await ResearchCycle(FakeHunter(), challenges, today=lambda: MONDAY).run()
        assert challenges.runs == 1

    @pytest.mark.asyncio
    async def test_force_challenges(self):
        from newsdesk.cortex.runners import ResearchCycle

        challenges = FakeChallenges()
        cycle = ResearchCycle(FakeHunter(), challenges, today=lambda: TUESDAY)

        await cycle.run(force_challenges=True)

        assert challenges.runs == 1

    @pytest.mark.asyncio
    async def test_overlapping_run_is_skipped(self):
        from newsdesk.cortex.runners import ResearchCycle

        gate = asyncio.Event()
        hunter = FakeHunter(gate=gate)
        cycle = ResearchCycle(hunter, today=lambda: TUESDAY)

        first = asyncio.create_task(cycle.run())
        await asyncio.sleep(0)
        assert cycle.is_running is True

        assert await cycle.run() is None
        gate.set()
        assert (await first).stored == 1
        assert hunter.runs == 1

    @pytest.mark.asyncio
    async def test_failure_is_logged_and_flag_reset(self, caplog):
        from newsdesk.cortex.runners import ResearchCycle

        cycle = ResearchCycle(FakeHunter(error=RuntimeError("search down")), today=lambda: TUESDAY)

        assert await cycle.run() is None
        assert cycle.is_running is False
        assert "Research cycle failed: search down" in caplog.text


# ---------------------------------------------------------------------------
# ChallengeGenerator
# ---------------------------------------------------------------------------


class TestChallengeGenerator:
    @pytest.mark.asyncio
    async def test_persists_valid_challenges(self, store, make_model):
        from newsdesk.cortex.runners import ChallengeGenerator

        reply = "```json\n" + json.dumps(
            [
                {"title": "Prompt Golf", "description": "Shortest prompt wins.", "type": "prompt_engineering"},
                {"title": "Missing description"},
                "not an object",
                {"title": "Tiny Classifier", "description": "Train a small model.", "type": "model_training"},
            ]
        ) + "\n```"
        generator = ChallengeGenerator(make_model([reply]), store, count=4)

        created = await generator.run()

        assert [c.title for c in created] == ["Prompt Golf", "Tiny Classifier"]
        assert len(await store.list_challenges()) == 2

    @pytest.mark.asyncio
    async def test_caps_at_count(self, store, make_model):
        from newsdesk.cortex.runners import ChallengeGenerator

        items = [{"title": f"C{i}", "description": "d"} for i in range(5)]
        generator = ChallengeGenerator(make_model([json.dumps(items)]), store, count=3)

        created = await generator.run()

        assert len(created) == 3
