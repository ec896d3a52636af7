"""Persistence contract for leads, challenges, issues, drafts and dedup history."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from newsdesk.core.types import (
    Challenge,
    Draft,
    DraftVersion,
    HistoryEntry,
    Issue,
    Lead,
)


class BaseStore(ABC):
    """Async CRUD store. Lookups return None for missing ids; updates raise NotFoundError."""

    # ---- Leads ----
    @abstractmethod
    async def list_leads(self) -> list[Lead]:
        """All leads, highest relevance first."""

    @abstractmethod
    async def get_lead(self, lead_id: int) -> Lead | None: ...

    async def get_leads(self, lead_ids: list[int]) -> list[Lead]:
        """Leads for `lead_ids` in the given order; missing ids are skipped."""
        leads = []
        for lead_id in lead_ids:
            lead = await self.get_lead(lead_id)
            if lead is not None:
                leads.append(lead)
        return leads

    @abstractmethod
    async def create_lead(self, lead: Lead) -> Lead: ...

    @abstractmethod
    async def delete_lead(self, lead_id: int) -> None: ...

    @abstractmethod
    async def delete_all_leads(self) -> int:
        """Delete every lead, nulling issue references first. Returns the count."""

    # ---- Challenges ----
    @abstractmethod
    async def list_challenges(self) -> list[Challenge]: ...

    @abstractmethod
    async def get_challenge(self, challenge_id: int) -> Challenge | None: ...

    @abstractmethod
    async def create_challenge(self, challenge: Challenge) -> Challenge: ...

    @abstractmethod
    async def clear_challenges(self) -> None: ...

    # ---- Issues ----
    @abstractmethod
    async def list_issues(self) -> list[Issue]: ...

    @abstractmethod
    async def get_issue(self, issue_id: int) -> Issue | None: ...

    @abstractmethod
    async def get_latest_issue(self) -> Issue | None: ...

    @abstractmethod
    async def create_issue(self, issue: Issue) -> Issue: ...

    @abstractmethod
    async def update_issue(self, issue_id: int, **updates: Any) -> Issue: ...

    # ---- Drafts ----
    @abstractmethod
    async def list_drafts(self) -> list[Draft]: ...

    @abstractmethod
    async def get_draft(self, draft_id: int) -> Draft | None: ...

    @abstractmethod
    async def get_draft_by_issue(self, issue_number: int) -> Draft | None: ...

    @abstractmethod
    async def create_draft(self, draft: Draft) -> Draft: ...

    @abstractmethod
    async def update_draft(self, draft_id: int, **updates: Any) -> Draft: ...

    @abstractmethod
    async def list_versions(self, draft_id: int) -> list[DraftVersion]:
        """Snapshots for a draft, newest version first."""

    @abstractmethod
    async def create_version(self, version: DraftVersion) -> DraftVersion: ...

    # ---- Dedup history ----
    @abstractmethod
    async def find_history_by_url(self, url: str) -> HistoryEntry | None: ...

    @abstractmethod
    async def add_history(self, entry: HistoryEntry) -> HistoryEntry: ...

    @abstractmethod
    async def list_history(self) -> list[HistoryEntry]:
        """Entries that carry an embedding."""

    @abstractmethod
    async def delete_history_before(self, cutoff: datetime) -> int: ...

    async def close(self) -> None:
        return None


__all__ = ["BaseStore"]
