"""Inputs and outputs of the newsletter draft graph."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from newsdesk.utils.urls import normalize_for_compare

# Research slot -> heading used in the research notes and the URL bank
SLOT_LABELS: dict[str, str] = {
    "main": "Main Story",
    "secondary": "Secondary Story",
    "scoop": "Weekly Scoop",
    "challenge": "Weekly Challenge",
}


class StoryTopic(BaseModel):
    """A story to cover. The URL is optional; research finds sources either way."""

    model_config = ConfigDict(extra="ignore")

    title: str
    url: str | None = None
    summary: str = ""


class ChallengeTopic(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""


class IssueContent(BaseModel):
    main_story: StoryTopic
    secondary_story: StoryTopic | None = None
    quick_links: list[StoryTopic] = Field(default_factory=list)
    challenge: ChallengeTopic | None = None


class UrlBank(BaseModel):
    """Research-verified URLs, partitioned by slot. The only allowed link targets."""

    categories: dict[str, list[str]] = Field(default_factory=dict)

    def add(self, slot: str, urls: list[str]) -> None:
        bucket = self.categories.setdefault(slot, [])
        for url in urls:
            url = url.strip()
            if url and url not in self:
                bucket.append(url)

    def urls(self) -> list[str]:
        return [url for bucket in self.categories.values() for url in bucket]

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        needle = normalize_for_compare(url)
        return any(normalize_for_compare(u) == needle for u in self.urls())

    def __len__(self) -> int:
        return len(self.urls())

    def render(self) -> str:
        lines: list[str] = []
        for slot, urls in self.categories.items():
            lines.append(f"{SLOT_LABELS.get(slot, slot.title())} URLs:")
            lines.extend(f"- {url}" for url in urls)
            if not urls:
                lines.append("- (none)")
            lines.append("")
        return "\n".join(lines).strip()


class DraftOutcome(BaseModel):
    markdown: str
    warnings: list[str] = Field(default_factory=list)
    # Completion calls made for the draft itself (rewrites not included)
    attempts: int = 0
    url_bank: UrlBank = Field(default_factory=UrlBank)


__all__ = [
    "SLOT_LABELS",
    "StoryTopic",
    "ChallengeTopic",
    "IssueContent",
    "UrlBank",
    "DraftOutcome",
]
