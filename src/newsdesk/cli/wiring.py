"""Build pipeline components from a `Config`.

Every collaborator is constructed here and injected; nothing below the CLI
reaches for global clients.
"""

from __future__ import annotations

import logging

from newsdesk.core.config import Config
from newsdesk.cortex.compliance import ComplianceFixer
from newsdesk.cortex.discovery import CandidateScorer, DedupEngine, ScoopHunter
from newsdesk.cortex.graphs.newsletter import DraftGenerator
from newsdesk.cortex.publication import FactChecker, Illustrator, PublicationPipeline
from newsdesk.cortex.runners import ChallengeGenerator, ResearchCycle
from newsdesk.modules.models import model_registry
from newsdesk.modules.providers.documents.google_docs import GoogleDocsPublisher
from newsdesk.modules.providers.images.pollinations import PollinationsImageGenerator
from newsdesk.modules.providers.liveness import UrlProbe
from newsdesk.modules.providers.storage import BaseStore, InMemoryStore
from newsdesk.modules.research import LLMGroundedSearch, LLMResearcher

logger = logging.getLogger(__name__)


async def open_store(config: Config) -> BaseStore:
    if not config.postgres.dsn:
        logger.warning("DATABASE_URL not set; using a non-persistent in-memory store")
        return InMemoryStore()

    from newsdesk.modules.providers.storage.postgres import PostgresStore

    store = PostgresStore(config.postgres, embedding_dim=config.models.embedding_dim)
    await store.open()
    await store.create_schema()
    return store


def build_research_cycle(config: Config, store: BaseStore) -> ResearchCycle:
    search = LLMGroundedSearch(model_registry.create_llm(config.models.search_llm, config=config))
    judge = model_registry.create_llm(config.models.judge_llm, config=config)
    dedup = DedupEngine(
        store,
        model_registry.create_embeddings(config=config),
        threshold=config.discovery.similarity_threshold,
    )
    hunter = ScoopHunter(
        search=search,
        dedup=dedup,
        scorer=CandidateScorer(judge, newsletter_name=config.draft.newsletter_name),
        store=store,
        config=config.discovery,
    )
    challenges = ChallengeGenerator(
        model_registry.create_llm(config=config),
        store,
        count=config.discovery.challenges_per_week,
    )
    return ResearchCycle(hunter, challenges)


def build_publication_pipeline(config: Config, store: BaseStore) -> PublicationPipeline:
    writer = model_registry.create_llm(config=config)
    judge = model_registry.create_llm(config.models.judge_llm, config=config)
    researcher = LLMResearcher(
        model_registry.create_llm(config.models.research_llm, config=config),
        temperature=config.draft.research_temperature,
        max_output_tokens=config.draft.research_max_tokens,
    )

    illustrator = None
    if config.images.enabled:
        illustrator = Illustrator(judge, PollinationsImageGenerator(config.images))

    return PublicationPipeline(
        store=store,
        generator=DraftGenerator(researcher=researcher, model=writer, config=config.draft),
        fixer=ComplianceFixer(writer, config.compliance),
        publisher=GoogleDocsPublisher(config.google_docs),
        fact_checker=FactChecker(
            judge, probe=UrlProbe(timeout_sec=config.publication.liveness_timeout_sec)
        ),
        illustrator=illustrator,
        config=config,
    )


__all__ = ["open_store", "build_research_cycle", "build_publication_pipeline"]
