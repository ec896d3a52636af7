"""Shared fakes for every collaborator the pipeline talks to."""

from __future__ import annotations

from typing import Callable

import pytest

from newsdesk.modules.markdown import DocumentLayout
from newsdesk.modules.models.base import BaseEmbeddings, BaseModel
from newsdesk.modules.models.types import ModelRequest, ModelResponse
from newsdesk.modules.providers.documents.base import BaseDocumentPublisher
from newsdesk.modules.providers.images.base import BaseImageGenerator
from newsdesk.modules.providers.storage import InMemoryStore
from newsdesk.modules.research.base import BaseResearcher, BaseSearch, ResearchResult, SearchHit

Reply = str | ModelResponse | Exception


class FakeModel(BaseModel):
    """Scripted completions. The last scripted reply repeats once the script runs out."""

    def __init__(
        self,
        replies: list[Reply] | None = None,
        *,
        handler: Callable[[ModelRequest], Reply] | None = None,
    ) -> None:
        self.replies = list(replies or [])
        self.handler = handler
        self.requests: list[ModelRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def generate(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        if self.handler is not None:
            reply = self.handler(request)
        elif len(self.replies) > 1:
            reply = self.replies.pop(0)
        else:
            reply = self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, ModelResponse):
            return reply
        return ModelResponse(text=reply)


class FakeEmbeddings(BaseEmbeddings):
    def __init__(self, vectors: dict[str, list[float]] | None = None) -> None:
        self.vectors = vectors or {}
        self.default = [1.0, 0.0, 0.0]
        self.queries: list[str] = []

    async def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return self.vectors.get(text, self.default)


class FakeSearch(BaseSearch):
    def __init__(self, hits: dict[str, list[SearchHit]] | None = None) -> None:
        self.hits = hits or {}

    async def search(self, query: str) -> list[SearchHit]:
        result = self.hits.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeResearcher(BaseResearcher):
    def __init__(self, *, citations: list[str] | None = None, fail_on: str | None = None) -> None:
        self.citations = citations or ["https://research.example.com/notes"]
        self.fail_on = fail_on
        self.prompts: list[str] = []

    async def research(self, prompt: str) -> ResearchResult:
        self.prompts.append(prompt)
        if self.fail_on and self.fail_on in prompt:
            raise RuntimeError("search backend unavailable")
        return ResearchResult(answer=f"Notes for prompt #{len(self.prompts)}", citations=self.citations)


class FakePublisher(BaseDocumentPublisher):
    def __init__(self, *, url: str = "https://docs.example.com/d/doc-1", error: Exception | None = None):
        self.url = url
        self.error = error
        self.calls: list[dict] = []

    async def publish(
        self, markdown: str, layout: DocumentLayout, *, title: str, image_url: str | None = None
    ) -> str:
        self.calls.append(
            {"markdown": markdown, "layout": layout, "title": title, "image_url": image_url}
        )
        if self.error is not None:
            raise self.error
        return self.url


class FakeImageGenerator(BaseImageGenerator):
    def __init__(self, url: str = "https://images.example.com/hero.png") -> None:
        self.url = url
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.url


# ---------------------------------------------------------------------------
# Newsletter markdown builder
# ---------------------------------------------------------------------------

SCOOP_EMOJI = ["🦴", "💸", "🚀", "🫧", "📊", "🧒"]


def _story(heading: str, anchor: str, url: str, words: int) -> str:
    """H1 story whose counted words (heading + anchor + prose) equal `words`."""
    fixed = len(heading.split()) + len(anchor.split())
    filler = " ".join(["word"] * (words - fixed))
    return f"# 🚀 {heading}\n\n[{anchor}]({url}) {filler}.\n"


def make_newsletter(
    *,
    main_words: int = 350,
    secondary_words: int | None = 350,
    challenge: bool = True,
    scoop_total: int = 6,
    scoop_linked: int | None = None,
    ending: str = "Reporting drew on Example News and Example Labs.",
) -> str:
    linked = scoop_total if scoop_linked is None else scoop_linked
    parts = [
        "**Subject Line:** Big Lab Ships A Reasoning Model",
        "**Preview Text:** A chip deal and a robotics surprise headline this week.",
        "**Newsletter Title:** The Reasoning Race Heats Up",
        "",
        "## Welcome To This Week's Edition Of Jumble",
        "",
        "This week a major lab shipped a new reasoning model. Let's dive in.",
        "",
        "## In This Newsletter",
        "",
        "- 🎨 A new reasoning model lands",
        "- 🎲 Chips change hands",
        "- 🍿 Robots learn to fold laundry",
        "- 🫧 Open weights keep growing",
        "- 🎯 Build a tiny agent" if challenge else "- 🧩 Benchmarks get harder",
        "",
        _story("Reasoning Model Arrives", "the launch announcement", "https://lab.example.com/launch", main_words),
    ]
    if secondary_words is not None:
        parts.append(
            _story("Chip Deal Reshapes Supply", "the merger filing", "https://chips.example.com/deal", secondary_words)
        )
    parts += ["## Weekly Scoop 📢", ""]
    for i in range(scoop_total):
        emoji = SCOOP_EMOJI[i % len(SCOOP_EMOJI)]
        if i < linked:
            parts.append(f"{emoji} [scoop story number {i + 1}](https://news.example.com/scoop-{i + 1}) lands this week.")
        else:
            parts.append(f"{emoji} Scoop story number {i + 1} lands this week.")
        parts.append("")
    if challenge:
        parts += ["## 🎯 Weekly Challenge Tiny Agent", "", "Build a tiny agent in one hour and share it.", ""]
    parts += [
        "## Wrap Up",
        "",
        "**Reply and tell us what you think.**",
        "",
        "## Sources",
        "",
        ending,
    ]
    return "\n".join(parts)


@pytest.fixture
def make_model():
    return FakeModel


@pytest.fixture
def embeddings():
    return FakeEmbeddings()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def researcher():
    return FakeResearcher()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def build_newsletter():
    return make_newsletter


@pytest.fixture
def fakes():
    """Fake classes for tests that need more than one configured instance."""

    class _Fakes:
        Model = FakeModel
        Embeddings = FakeEmbeddings
        Search = FakeSearch
        Researcher = FakeResearcher
        Publisher = FakePublisher
        ImageGenerator = FakeImageGenerator

    return _Fakes
