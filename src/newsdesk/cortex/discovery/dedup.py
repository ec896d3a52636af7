"""Duplicate detection against the newsletter history index.

Exact URL lookup first, then title-embedding cosine similarity against every
historical embedding. Errors fail open: a missed duplicate is cheaper than a
silently dropped lead.
"""

from __future__ import annotations

import logging
from datetime import timedelta

import numpy as np

from newsdesk.core.types import DuplicateCheck, HistoryEntry, utcnow
from newsdesk.modules.models.base import BaseEmbeddings
from newsdesk.modules.providers.storage.base import BaseStore

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.85


def cosine_similarities(query: list[float], matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of `query` against each row of `matrix` (zero-norm rows -> 0)."""
    q = np.asarray(query, dtype=float)
    q_norm = np.linalg.norm(q)
    if q_norm == 0 or matrix.size == 0:
        return np.zeros(matrix.shape[0] if matrix.ndim == 2 else 0)
    norms = np.linalg.norm(matrix, axis=1)
    norms = np.where(norms == 0, 1, norms)
    return (matrix @ q) / (norms * q_norm)


class DedupEngine:
    def __init__(
        self,
        store: BaseStore,
        embeddings: BaseEmbeddings,
        *,
        threshold: float = SIMILARITY_THRESHOLD,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._threshold = threshold

    async def _ranked(self, title: str) -> list[tuple[HistoryEntry, float]]:
        embedding = await self._embeddings.embed_query(title)
        entries = [e for e in await self._store.list_history() if e.embedding]
        if not entries:
            return []
        dim = len(embedding)
        entries = [e for e in entries if len(e.embedding or []) == dim]
        if not entries:
            return []
        matrix = np.asarray([e.embedding for e in entries], dtype=float)
        sims = cosine_similarities(embedding, matrix)
        order = np.argsort(-sims)
        return [(entries[i], float(sims[i])) for i in order]

    async def check_duplicate(self, url: str, title: str) -> DuplicateCheck:
        try:
            exact = await self._store.find_history_by_url(url)
            if exact is not None:
                logger.info("Exact URL match found: %s", url)
                return DuplicateCheck(
                    is_duplicate=True, match_type="exact_url", matched_title=exact.title
                )

            ranked = await self._ranked(title)
            if ranked and ranked[0][1] > self._threshold:
                match, similarity = ranked[0]
                logger.info(
                    "Semantic match found: '%s' (%d%% similar)", match.title, round(similarity * 100)
                )
                return DuplicateCheck(
                    is_duplicate=True,
                    match_type="semantic_similarity",
                    matched_title=match.title,
                    similarity=similarity,
                )
            return DuplicateCheck(is_duplicate=False)
        except Exception as e:
            logger.warning("Error checking duplicate for %s: %s", url, e)
            return DuplicateCheck(is_duplicate=False)

    async def embed(self, title: str) -> list[float] | None:
        try:
            return await self._embeddings.embed_query(title)
        except Exception as e:
            logger.warning("Error embedding title '%s': %s", title, e)
            return None

    async def add_to_history(
        self, url: str, title: str, *, embedding: list[float] | None = None
    ) -> HistoryEntry | None:
        """Index a story, embedding the title unless an embedding is given. Best-effort."""
        try:
            if embedding is None:
                embedding = await self._embeddings.embed_query(title)
            entry = await self._store.add_history(
                HistoryEntry(url=url, title=title, embedding=embedding)
            )
            logger.info("Added to history: %s", title)
            return entry
        except Exception as e:
            logger.warning("Error adding to history: %s", e)
            return None

    async def find_similar(self, title: str, limit: int = 5) -> list[tuple[HistoryEntry, float]]:
        try:
            return (await self._ranked(title))[:limit]
        except Exception as e:
            logger.warning("Error finding similar stories: %s", e)
            return []

    async def cleanup_history(self, days_to_keep: int = 90) -> int:
        cutoff = utcnow() - timedelta(days=days_to_keep)
        try:
            deleted = await self._store.delete_history_before(cutoff)
        except Exception as e:
            logger.warning("Error cleaning up history: %s", e)
            return 0
        logger.info("Cleaned up %s old history entries", deleted)
        return deleted


__all__ = ["SIMILARITY_THRESHOLD", "cosine_similarities", "DedupEngine"]
