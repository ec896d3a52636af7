"""Unit tests for discovery: roundup filter, dedup engine, scoring and ScoopHunter."""

from __future__ import annotations

import json

import pytest

# ---------------------------------------------------------------------------
# Roundup title filter
# ---------------------------------------------------------------------------


class TestRoundupFilter:
    @pytest.mark.parametrize(
        "title",
        [
            "AI Weekly Roundup: everything from the labs",
            "This Week in AI",
            "Top 10 AI tools you should try",
            "5 things we learned at the developer conference",
            "The Batch newsletter",
            "AI news March 2025",
            "Daily recap of model launches",
        ],
    )
    def test_flags_roundup_shaped_titles(self, title):
        from newsdesk.cortex.discovery import is_roundup_by_title

        assert is_roundup_by_title(title) is True

    @pytest.mark.parametrize(
        "title",
        [
            "Lab releases a new reasoning model",
            "Chipmaker agrees to buy robotics startup",
            "Regulator opens inquiry into model training data",
        ],
    )
    def test_passes_single_story_titles(self, title):
        from newsdesk.cortex.discovery import is_roundup_by_title

        assert is_roundup_by_title(title) is False

    def test_empty_title_is_not_a_roundup(self):
        from newsdesk.cortex.discovery import is_roundup_by_title

        assert is_roundup_by_title("") is False


# ---------------------------------------------------------------------------
# DedupEngine
# ---------------------------------------------------------------------------


class TestDedupEngine:
    @pytest.mark.asyncio
    async def test_exact_url_match(self, store, embeddings):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.cortex.discovery import DedupEngine

        await store.add_history(
            HistoryEntry(url="https://lab.example.com/launch", title="Lab launch")
        )
        engine = DedupEngine(store, embeddings)

        check = await engine.check_duplicate("https://lab.example.com/launch", "Other title")

        assert check.is_duplicate is True
        assert check.match_type == "exact_url"
        assert check.matched_title == "Lab launch"
        # Exact match short-circuits before any embedding call
        assert embeddings.queries == []

    @pytest.mark.asyncio
    async def test_semantic_match_above_threshold(self, store, fakes):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.cortex.discovery import DedupEngine

        await store.add_history(
            HistoryEntry(url="https://a.example.com/1", title="Old story", embedding=[1.0, 0.0])
        )
        embeddings = fakes.Embeddings({"New story": [0.99, 0.1]})
        engine = DedupEngine(store, embeddings)

        check = await engine.check_duplicate("https://b.example.com/2", "New story")

        assert check.is_duplicate is True
        assert check.match_type == "semantic_similarity"
        assert check.matched_title == "Old story"
        assert check.similarity > 0.85

    @pytest.mark.asyncio
    async def test_similarity_equal_to_threshold_is_not_duplicate(self, store, fakes):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.cortex.discovery import DedupEngine

        await store.add_history(
            HistoryEntry(url="https://a.example.com/1", title="Old story", embedding=[1.0, 0.0])
        )
        engine = DedupEngine(store, fakes.Embeddings({"New story": [1.0, 0.0]}), threshold=1.0)

        check = await engine.check_duplicate("https://b.example.com/2", "New story")

        assert check.is_duplicate is False

    @pytest.mark.asyncio
    async def test_unrelated_story_is_not_duplicate(self, store, fakes):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.cortex.discovery import DedupEngine

        await store.add_history(
            HistoryEntry(url="https://a.example.com/1", title="Old story", embedding=[1.0, 0.0])
        )
        engine = DedupEngine(store, fakes.Embeddings({"New story": [0.0, 1.0]}))

        check = await engine.check_duplicate("https://b.example.com/2", "New story")

        assert check.is_duplicate is False
        assert check.match_type is None

    @pytest.mark.asyncio
    async def test_embedding_failure_fails_open(self, store):
        from newsdesk.cortex.discovery import DedupEngine
        from newsdesk.modules.models.base import BaseEmbeddings

        class BrokenEmbeddings(BaseEmbeddings):
            async def embed_query(self, text: str) -> list[float]:
                raise RuntimeError("embedding service down")

        engine = DedupEngine(store, BrokenEmbeddings())

        check = await engine.check_duplicate("https://b.example.com/2", "New story")

        assert check.is_duplicate is False

    @pytest.mark.asyncio
    async def test_add_to_history_stores_embedding(self, store, embeddings):
        from newsdesk.cortex.discovery import DedupEngine

        engine = DedupEngine(store, embeddings)

        entry = await engine.add_to_history("https://a.example.com/1", "A story")

        assert entry is not None
        assert entry.embedding == [1.0, 0.0, 0.0]
        assert await store.find_history_by_url("https://a.example.com/1") is not None

    @pytest.mark.asyncio
    async def test_find_similar_ranks_best_first(self, store, fakes):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.cortex.discovery import DedupEngine

        await store.add_history(
            HistoryEntry(url="https://a.example.com/far", title="Far", embedding=[0.0, 1.0])
        )
        await store.add_history(
            HistoryEntry(url="https://a.example.com/near", title="Near", embedding=[1.0, 0.1])
        )
        engine = DedupEngine(store, fakes.Embeddings({"Query": [1.0, 0.0]}))

        ranked = await engine.find_similar("Query", limit=2)

        assert [entry.title for entry, _ in ranked] == ["Near", "Far"]


class TestCosineSimilarities:
    def test_zero_norm_rows_score_zero(self):
        import numpy as np

        from newsdesk.cortex.discovery.dedup import cosine_similarities

        sims = cosine_similarities([1.0, 0.0], np.asarray([[0.0, 0.0], [2.0, 0.0]]))

        assert sims[0] == pytest.approx(0.0)
        assert sims[1] == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# CandidateScorer
# ---------------------------------------------------------------------------


def _score_reply(score, *, roundup=False, summary="One line summary."):
    return json.dumps(
        {"relevanceScore": score, "isRoundup": roundup, "summary": summary, "reasoning": "ok"}
    )


class TestCandidateScorer:
    @pytest.mark.asyncio
    async def test_score_parses_and_clamps(self, make_model):
        from newsdesk.core.types import Candidate
        from newsdesk.cortex.discovery import CandidateScorer

        model = make_model([_score_reply(140)])
        scorer = CandidateScorer(model)

        result = await scorer.score(Candidate(title="Story", url="https://a.example.com/1"))

        assert result.relevance_score == 100
        assert result.summary == "One line summary."
        assert model.requests[0].response_format == "json_object"
        assert model.requests[0].temperature == 0.2

    @pytest.mark.asyncio
    async def test_unusable_reply_raises(self, make_model):
        from newsdesk.core.types import Candidate
        from newsdesk.cortex.discovery import CandidateScorer

        scorer = CandidateScorer(make_model(["I cannot score this."]))

        with pytest.raises(ValueError):
            await scorer.score(Candidate(title="Story", url="https://a.example.com/1"))

    @pytest.mark.asyncio
    async def test_batch_drops_roundups_and_failures_and_sorts(self, make_model):
        from newsdesk.core.types import Candidate
        from newsdesk.cortex.discovery import CandidateScorer

        replies = {
            "Low": _score_reply(40),
            "High": _score_reply(90),
            "Digest": _score_reply(95, roundup=True),
            "Broken": RuntimeError("judge unavailable"),
        }
        model = make_model(
            handler=lambda req: next(v for k, v in replies.items() if f"Title: {k}\n" in req.user_text())
        )
        scorer = CandidateScorer(model)
        candidates = [
            Candidate(title=title, url=f"https://a.example.com/{title.lower()}")
            for title in replies
        ]

        scored = await scorer.score_and_summarize(candidates)

        assert [c.title for c in scored] == ["High", "Low"]


# ---------------------------------------------------------------------------
# ScoopHunter
# ---------------------------------------------------------------------------


def _hunter(store, embeddings, search, model, **config):
    from newsdesk.core.config import DiscoveryConfig
    from newsdesk.cortex.discovery import CandidateScorer, DedupEngine, ScoopHunter

    return ScoopHunter(
        search=search,
        dedup=DedupEngine(store, embeddings),
        scorer=CandidateScorer(model),
        store=store,
        config=DiscoveryConfig(search_queries=["ai news"], **config),
    )


def _score_by_title(scores):
    def handler(request):
        for title, score in scores.items():
            if f"Title: {title}\n" in request.user_text():
                return _score_reply(score)
        raise AssertionError("unexpected candidate")

    return handler


class TestScoopHunter:
    @pytest.mark.asyncio
    async def test_exact_url_duplicate_is_never_persisted(self, store, embeddings, fakes):
        from newsdesk.core.types import HistoryEntry
        from newsdesk.modules.research import SearchHit

        await store.add_history(
            HistoryEntry(url="https://lab.example.com/launch", title="Lab launch", embedding=[0.0, 1.0, 0.0])
        )
        search = fakes.Search(
            {
                "ai news": [
                    SearchHit(
                        title="Lab launches a model",
                        url="https://lab.example.com/launch?utm_source=feed",
                    )
                ]
            }
        )
        model = fakes.Model([_score_reply(95)])
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run()

        assert report.duplicates == 1
        assert report.stored == 0
        assert await store.list_leads() == []
        assert model.calls == 0

    @pytest.mark.asyncio
    async def test_relevance_threshold_boundary(self, store, fakes):
        from newsdesk.modules.research import SearchHit

        # Orthogonal embeddings keep the two stories from deduplicating each other
        embeddings = fakes.Embeddings(
            {"Story scored 69": [1.0, 0.0, 0.0], "Story scored 70": [0.0, 1.0, 0.0]}
        )
        search = fakes.Search(
            {
                "ai news": [
                    SearchHit(title="Story scored 69", url="https://a.example.com/69"),
                    SearchHit(title="Story scored 70", url="https://a.example.com/70"),
                ]
            }
        )
        model = fakes.Model(handler=_score_by_title({"Story scored 69": 69, "Story scored 70": 70}))
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run()

        leads = await store.list_leads()
        assert [lead.title for lead in leads] == ["Story scored 70"]
        assert leads[0].relevance_score == 70
        assert leads[0].source == "a.example.com"
        assert report.scored == 2
        assert report.stored == 1
        # Stored leads enter the history index; rejected ones do not
        assert await store.find_history_by_url("https://a.example.com/70") is not None
        assert await store.find_history_by_url("https://a.example.com/69") is None

    @pytest.mark.asyncio
    async def test_roundup_titles_skip_scoring(self, store, embeddings, fakes):
        from newsdesk.modules.research import SearchHit

        search = fakes.Search(
            {"ai news": [SearchHit(title="Top 10 AI stories", url="https://a.example.com/top")]}
        )
        model = fakes.Model([_score_reply(99)])
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run()

        assert report.roundups == 1
        assert model.calls == 0
        assert report.stored == 0

    @pytest.mark.asyncio
    async def test_same_url_in_one_batch_is_scored_once(self, store, embeddings, fakes):
        from newsdesk.modules.research import SearchHit

        hit = SearchHit(title="Lab launches a model", url="https://lab.example.com/launch")
        search = fakes.Search({"q1": [hit], "q2": [hit]})
        model = fakes.Model([_score_reply(80)])
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run(["q1", "q2"])

        assert model.calls == 1
        assert report.duplicates == 1
        assert report.stored == 1

    @pytest.mark.asyncio
    async def test_failed_query_is_reported_and_others_continue(self, store, embeddings, fakes):
        from newsdesk.modules.research import SearchHit

        search = fakes.Search(
            {
                "broken": RuntimeError("search down"),
                "ok": [SearchHit(title="Lab launches a model", url="https://lab.example.com/launch")],
            }
        )
        model = fakes.Model([_score_reply(85)])
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run(["broken", "ok"])

        assert report.failed_queries == ["broken"]
        assert report.stored == 1
        assert report.leads[0].embedding == [1.0, 0.0, 0.0]

    @pytest.mark.asyncio
    async def test_failed_insert_leaves_history_untouched(self, fakes):
        from newsdesk.modules.providers.storage import InMemoryStore
        from newsdesk.modules.research import SearchHit

        class FlakyStore(InMemoryStore):
            def __init__(self):
                super().__init__()
                self.failures = {"https://a.example.com/first"}

            async def create_lead(self, lead):
                if lead.url in self.failures:
                    self.failures.discard(lead.url)
                    raise RuntimeError("db down")
                return await super().create_lead(lead)

        store = FlakyStore()
        embeddings = fakes.Embeddings({"First story": [1.0, 0.0, 0.0], "Second story": [0.0, 1.0, 0.0]})
        search = fakes.Search(
            {
                "ai news": [
                    SearchHit(title="First story", url="https://a.example.com/first"),
                    SearchHit(title="Second story", url="https://a.example.com/second"),
                ]
            }
        )
        model = fakes.Model([_score_reply(90)])
        hunter = _hunter(store, embeddings, search, model)

        report = await hunter.run()

        assert report.failed_leads == ["https://a.example.com/first"]
        assert [lead.title for lead in report.leads] == ["Second story"]
        assert await store.find_history_by_url("https://a.example.com/first") is None

        retry = await hunter.run()

        assert retry.duplicates == 1
        assert [lead.title for lead in retry.leads] == ["First story"]
        assert sorted(lead.title for lead in await store.list_leads()) == ["First story", "Second story"]
