"""PostgreSQL store (psycopg 3 async pool + pgvector).

Embeddings are written as pgvector text literals (`[0.1,0.2,...]`) and read
back by casting to text, so no pgvector Python adapter is required.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from psycopg import sql
from psycopg.errors import UniqueViolation
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from newsdesk.core.config import PostgresConfig
from newsdesk.core.exceptions import ConfigurationError, NotFoundError, StorageError
from newsdesk.core.types import (
    Challenge,
    Draft,
    DraftVersion,
    HistoryEntry,
    Issue,
    Lead,
)

from .base import BaseStore

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS vector;

CREATE TABLE IF NOT EXISTS leads (
    id SERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    source TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL,
    summary TEXT NOT NULL DEFAULT '',
    relevance_score INTEGER NOT NULL DEFAULT 0,
    embedding vector({dim}),
    fact_check_status TEXT NOT NULL DEFAULT 'pending',
    primary_source_url TEXT,
    note TEXT,
    is_manual BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS challenges (
    id SERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    type TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS issues (
    id SERIAL PRIMARY KEY,
    issue_number INTEGER NOT NULL,
    main_story_id INTEGER REFERENCES leads(id),
    secondary_story_id INTEGER REFERENCES leads(id),
    challenge_id INTEGER REFERENCES challenges(id),
    quick_link_ids INTEGER[] NOT NULL DEFAULT ARRAY[]::INTEGER[],
    document_url TEXT,
    published_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS newsletter_history (
    id SERIAL PRIMARY KEY,
    url TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    embedding vector({dim}),
    published_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS newsletter_drafts (
    id SERIAL PRIMARY KEY,
    issue_id INTEGER REFERENCES issues(id),
    issue_number INTEGER NOT NULL UNIQUE,
    content TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'draft',
    document_url TEXT,
    hero_image_url TEXT,
    hero_image_prompt TEXT,
    published_at TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS newsletter_versions (
    id SERIAL PRIMARY KEY,
    draft_id INTEGER NOT NULL REFERENCES newsletter_drafts(id),
    content TEXT NOT NULL,
    version_number INTEGER NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

_ISSUE_COLUMNS = {
    "issue_number",
    "main_story_id",
    "secondary_story_id",
    "challenge_id",
    "quick_link_ids",
    "document_url",
    "published_at",
}
_DRAFT_COLUMNS = {
    "issue_id",
    "content",
    "status",
    "document_url",
    "hero_image_url",
    "hero_image_prompt",
    "published_at",
    "updated_at",
}


def to_vector_literal(embedding: list[float] | None) -> str | None:
    if embedding is None:
        return None
    return "[" + ",".join(repr(float(x)) for x in embedding) + "]"


def from_vector_literal(raw: Any) -> list[float] | None:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return [float(x) for x in raw]
    return [float(x) for x in json.loads(str(raw))]


class PostgresStore(BaseStore):
    """Store backed by PostgreSQL. Call `open()` before use and `close()` after."""

    def __init__(self, config: PostgresConfig, *, embedding_dim: int = 768) -> None:
        if not config.dsn:
            raise ConfigurationError("DATABASE_URL is required for the Postgres store")
        self._embedding_dim = embedding_dim
        self._pool = AsyncConnectionPool(
            config.dsn,
            min_size=config.pool_min_size,
            max_size=config.pool_max_size,
            kwargs={"row_factory": dict_row},
            open=False,
        )

    async def open(self) -> None:
        await self._pool.open()

    async def close(self) -> None:
        await self._pool.close()

    async def create_schema(self) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(SCHEMA_SQL.replace("{dim}", str(self._embedding_dim)))

    async def _fetchall(self, query: str | sql.Composed, params: Any = None) -> list[dict]:
        try:
            async with self._pool.connection() as conn:
                cur = await conn.execute(query, params)
                return await cur.fetchall()
        except UniqueViolation as e:
            raise StorageError(f"Unique constraint violated: {e}") from e

    async def _fetchone(self, query: str | sql.Composed, params: Any = None) -> dict | None:
        rows = await self._fetchall(query, params)
        return rows[0] if rows else None

    async def _update(
        self, table: str, allowed: set[str], record_id: int, updates: dict[str, Any]
    ) -> dict:
        unknown = set(updates) - allowed
        if unknown:
            raise StorageError(f"Cannot update {table} columns: {sorted(unknown)}")
        if not updates:
            row = await self._fetchone(
                sql.SQL("SELECT * FROM {} WHERE id = %s").format(sql.Identifier(table)),
                [record_id],
            )
        else:
            assignments = sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(col)) for col in updates
            )
            row = await self._fetchone(
                sql.SQL("UPDATE {} SET {} WHERE id = %s RETURNING *").format(
                    sql.Identifier(table), assignments
                ),
                [*updates.values(), record_id],
            )
        if row is None:
            raise NotFoundError(f"{table} {record_id} not found")
        return row

    # ---- Leads ----
    @staticmethod
    def _lead(row: dict) -> Lead:
        return Lead.model_validate({**row, "embedding": from_vector_literal(row.get("embedding"))})

    _LEAD_SELECT = "SELECT *, embedding::text AS embedding FROM leads"

    async def list_leads(self) -> list[Lead]:
        rows = await self._fetchall(self._LEAD_SELECT + " ORDER BY relevance_score DESC")
        return [self._lead(r) for r in rows]

    async def get_lead(self, lead_id: int) -> Lead | None:
        row = await self._fetchone(self._LEAD_SELECT + " WHERE id = %s", [lead_id])
        return self._lead(row) if row else None

    async def create_lead(self, lead: Lead) -> Lead:
        row = await self._fetchone(
            """
            INSERT INTO leads (title, source, url, summary, relevance_score, embedding,
                               fact_check_status, primary_source_url, note, is_manual)
            VALUES (%s, %s, %s, %s, %s, %s::vector, %s, %s, %s, %s)
            RETURNING *, embedding::text AS embedding
            """,
            [
                lead.title,
                lead.source,
                lead.url,
                lead.summary,
                lead.relevance_score,
                to_vector_literal(lead.embedding),
                lead.fact_check_status,
                lead.primary_source_url,
                lead.note,
                lead.is_manual,
            ],
        )
        return self._lead(row)

    async def delete_lead(self, lead_id: int) -> None:
        await self._fetchall("DELETE FROM leads WHERE id = %s RETURNING id", [lead_id])

    async def delete_all_leads(self) -> int:
        async with self._pool.connection() as conn:
            async with conn.transaction():
                await conn.execute(
                    "UPDATE issues SET main_story_id = NULL, secondary_story_id = NULL, "
                    "quick_link_ids = ARRAY[]::INTEGER[]"
                )
                cur = await conn.execute("DELETE FROM leads")
                return cur.rowcount or 0

    # ---- Challenges ----
    async def list_challenges(self) -> list[Challenge]:
        rows = await self._fetchall("SELECT * FROM challenges ORDER BY created_at DESC")
        return [Challenge.model_validate(r) for r in rows]

    async def get_challenge(self, challenge_id: int) -> Challenge | None:
        row = await self._fetchone("SELECT * FROM challenges WHERE id = %s", [challenge_id])
        return Challenge.model_validate(row) if row else None

    async def create_challenge(self, challenge: Challenge) -> Challenge:
        row = await self._fetchone(
            "INSERT INTO challenges (title, description, type) VALUES (%s, %s, %s) RETURNING *",
            [challenge.title, challenge.description, challenge.type],
        )
        return Challenge.model_validate(row)

    async def clear_challenges(self) -> None:
        async with self._pool.connection() as conn:
            async with conn.transaction():
                await conn.execute("UPDATE issues SET challenge_id = NULL")
                await conn.execute("DELETE FROM challenges")

    # ---- Issues ----
    async def list_issues(self) -> list[Issue]:
        rows = await self._fetchall("SELECT * FROM issues ORDER BY published_at DESC NULLS LAST")
        return [Issue.model_validate(r) for r in rows]

    async def get_issue(self, issue_id: int) -> Issue | None:
        row = await self._fetchone("SELECT * FROM issues WHERE id = %s", [issue_id])
        return Issue.model_validate(row) if row else None

    async def get_latest_issue(self) -> Issue | None:
        row = await self._fetchone("SELECT * FROM issues ORDER BY issue_number DESC LIMIT 1")
        return Issue.model_validate(row) if row else None

    async def create_issue(self, issue: Issue) -> Issue:
        row = await self._fetchone(
            """
            INSERT INTO issues (issue_number, main_story_id, secondary_story_id, challenge_id,
                                quick_link_ids, document_url, published_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            [
                issue.issue_number,
                issue.main_story_id,
                issue.secondary_story_id,
                issue.challenge_id,
                issue.quick_link_ids,
                issue.document_url,
                issue.published_at,
            ],
        )
        return Issue.model_validate(row)

    async def update_issue(self, issue_id: int, **updates: Any) -> Issue:
        row = await self._update("issues", _ISSUE_COLUMNS, issue_id, updates)
        return Issue.model_validate(row)

    # ---- Drafts ----
    async def list_drafts(self) -> list[Draft]:
        rows = await self._fetchall("SELECT * FROM newsletter_drafts ORDER BY created_at DESC")
        return [Draft.model_validate(r) for r in rows]

    async def get_draft(self, draft_id: int) -> Draft | None:
        row = await self._fetchone("SELECT * FROM newsletter_drafts WHERE id = %s", [draft_id])
        return Draft.model_validate(row) if row else None

    async def get_draft_by_issue(self, issue_number: int) -> Draft | None:
        row = await self._fetchone(
            "SELECT * FROM newsletter_drafts WHERE issue_number = %s", [issue_number]
        )
        return Draft.model_validate(row) if row else None

    async def create_draft(self, draft: Draft) -> Draft:
        row = await self._fetchone(
            """
            INSERT INTO newsletter_drafts (issue_id, issue_number, content, status,
                                           hero_image_url, hero_image_prompt)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            [
                draft.issue_id,
                draft.issue_number,
                draft.content,
                draft.status,
                draft.hero_image_url,
                draft.hero_image_prompt,
            ],
        )
        return Draft.model_validate(row)

    async def update_draft(self, draft_id: int, **updates: Any) -> Draft:
        row = await self._update("newsletter_drafts", _DRAFT_COLUMNS, draft_id, updates)
        return Draft.model_validate(row)

    async def list_versions(self, draft_id: int) -> list[DraftVersion]:
        rows = await self._fetchall(
            "SELECT * FROM newsletter_versions WHERE draft_id = %s ORDER BY version_number DESC",
            [draft_id],
        )
        return [DraftVersion.model_validate(r) for r in rows]

    async def create_version(self, version: DraftVersion) -> DraftVersion:
        row = await self._fetchone(
            """
            INSERT INTO newsletter_versions (draft_id, content, version_number)
            VALUES (%s, %s, %s)
            RETURNING *
            """,
            [version.draft_id, version.content, version.version_number],
        )
        return DraftVersion.model_validate(row)

    # ---- Dedup history ----
    @staticmethod
    def _history(row: dict) -> HistoryEntry:
        return HistoryEntry.model_validate(
            {**row, "embedding": from_vector_literal(row.get("embedding"))}
        )

    async def find_history_by_url(self, url: str) -> HistoryEntry | None:
        row = await self._fetchone(
            "SELECT *, embedding::text AS embedding FROM newsletter_history WHERE url = %s LIMIT 1",
            [url],
        )
        return self._history(row) if row else None

    async def add_history(self, entry: HistoryEntry) -> HistoryEntry:
        row = await self._fetchone(
            """
            INSERT INTO newsletter_history (url, title, embedding)
            VALUES (%s, %s, %s::vector)
            RETURNING *, embedding::text AS embedding
            """,
            [entry.url, entry.title, to_vector_literal(entry.embedding)],
        )
        return self._history(row)

    async def list_history(self) -> list[HistoryEntry]:
        rows = await self._fetchall(
            "SELECT *, embedding::text AS embedding FROM newsletter_history "
            "WHERE embedding IS NOT NULL"
        )
        return [self._history(r) for r in rows]

    async def delete_history_before(self, cutoff: datetime) -> int:
        rows = await self._fetchall(
            "DELETE FROM newsletter_history WHERE published_at < %s RETURNING id", [cutoff]
        )
        logger.info("Deleted %s history entries older than %s", len(rows), cutoff.isoformat())
        return len(rows)


__all__ = ["SCHEMA_SQL", "PostgresStore", "to_vector_literal", "from_vector_literal"]
