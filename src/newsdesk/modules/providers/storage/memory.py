"""In-process store used by tests and dry runs."""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel

from newsdesk.core.exceptions import NotFoundError, StorageError
from newsdesk.core.types import (
    Challenge,
    Draft,
    DraftVersion,
    HistoryEntry,
    Issue,
    Lead,
    utcnow,
)

from .base import BaseStore

T = TypeVar("T", bound=BaseModel)


class InMemoryStore(BaseStore):
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.leads: dict[int, Lead] = {}
        self.challenges: dict[int, Challenge] = {}
        self.issues: dict[int, Issue] = {}
        self.drafts: dict[int, Draft] = {}
        self.versions: dict[int, DraftVersion] = {}
        self.history: dict[int, HistoryEntry] = {}

    def _insert(self, table: dict[int, T], record: T) -> T:
        stored = record.model_copy(update={"id": next(self._ids)})
        table[stored.id] = stored  # type: ignore[attr-defined]
        return stored

    def _update(self, table: dict[int, T], record_id: int, kind: str, **updates: Any) -> T:
        current = table.get(record_id)
        if current is None:
            raise NotFoundError(f"{kind} {record_id} not found")
        updated = current.model_copy(update=updates)
        table[record_id] = updated
        return updated

    # ---- Leads ----
    async def list_leads(self) -> list[Lead]:
        return sorted(self.leads.values(), key=lambda lead: lead.relevance_score, reverse=True)

    async def get_lead(self, lead_id: int) -> Lead | None:
        return self.leads.get(lead_id)

    async def create_lead(self, lead: Lead) -> Lead:
        return self._insert(self.leads, lead)

    async def delete_lead(self, lead_id: int) -> None:
        self.leads.pop(lead_id, None)

    async def delete_all_leads(self) -> int:
        for issue_id, issue in list(self.issues.items()):
            self.issues[issue_id] = issue.model_copy(
                update={"main_story_id": None, "secondary_story_id": None, "quick_link_ids": []}
            )
        count = len(self.leads)
        self.leads.clear()
        return count

    # ---- Challenges ----
    async def list_challenges(self) -> list[Challenge]:
        return sorted(self.challenges.values(), key=lambda c: c.created_at, reverse=True)

    async def get_challenge(self, challenge_id: int) -> Challenge | None:
        return self.challenges.get(challenge_id)

    async def create_challenge(self, challenge: Challenge) -> Challenge:
        return self._insert(self.challenges, challenge)

    async def clear_challenges(self) -> None:
        self.challenges.clear()

    # ---- Issues ----
    async def list_issues(self) -> list[Issue]:
        return sorted(
            self.issues.values(),
            key=lambda i: i.published_at or datetime.min.replace(tzinfo=utcnow().tzinfo),
            reverse=True,
        )

    async def get_issue(self, issue_id: int) -> Issue | None:
        return self.issues.get(issue_id)

    async def get_latest_issue(self) -> Issue | None:
        return max(self.issues.values(), key=lambda i: i.issue_number, default=None)

    async def create_issue(self, issue: Issue) -> Issue:
        return self._insert(self.issues, issue)

    async def update_issue(self, issue_id: int, **updates: Any) -> Issue:
        return self._update(self.issues, issue_id, "Issue", **updates)

    # ---- Drafts ----
    async def list_drafts(self) -> list[Draft]:
        return sorted(self.drafts.values(), key=lambda d: d.created_at, reverse=True)

    async def get_draft(self, draft_id: int) -> Draft | None:
        return self.drafts.get(draft_id)

    async def get_draft_by_issue(self, issue_number: int) -> Draft | None:
        return next((d for d in self.drafts.values() if d.issue_number == issue_number), None)

    async def create_draft(self, draft: Draft) -> Draft:
        if await self.get_draft_by_issue(draft.issue_number) is not None:
            raise StorageError(f"Draft for issue {draft.issue_number} already exists")
        return self._insert(self.drafts, draft)

    async def update_draft(self, draft_id: int, **updates: Any) -> Draft:
        return self._update(self.drafts, draft_id, "Draft", **updates)

    async def list_versions(self, draft_id: int) -> list[DraftVersion]:
        return sorted(
            (v for v in self.versions.values() if v.draft_id == draft_id),
            key=lambda v: v.version_number,
            reverse=True,
        )

    async def create_version(self, version: DraftVersion) -> DraftVersion:
        return self._insert(self.versions, version)

    # ---- Dedup history ----
    async def find_history_by_url(self, url: str) -> HistoryEntry | None:
        return next((h for h in self.history.values() if h.url == url), None)

    async def add_history(self, entry: HistoryEntry) -> HistoryEntry:
        if await self.find_history_by_url(entry.url) is not None:
            raise StorageError(f"History entry for {entry.url} already exists")
        return self._insert(self.history, entry)

    async def list_history(self) -> list[HistoryEntry]:
        return [h for h in self.history.values() if h.embedding is not None]

    async def delete_history_before(self, cutoff: datetime) -> int:
        stale = [hid for hid, h in self.history.items() if h.published_at < cutoff]
        for hid in stale:
            del self.history[hid]
        return len(stale)


__all__ = ["InMemoryStore"]
