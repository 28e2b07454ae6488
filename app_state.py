"""Core module - shared state and dependency providers."""

from __future__ import annotations

import logging
from typing import Optional

from quizmaster.config import QuizConfig
from quizmaster.engine import QuestionNormalizer, QuizGenerator, SubmissionPipeline
from quizmaster.storage import InMemoryQuizStore, QuizStore
from quizmaster.trivia import OpenTriviaClient

logger = logging.getLogger(__name__)

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

config: Optional[QuizConfig] = None
store: Optional[QuizStore] = None
trivia_client: Optional[OpenTriviaClient] = None


def get_config() -> QuizConfig:
    """Configuration loaded once from the environment."""
    global config
    if config is None:
        config = QuizConfig.from_env()
    return config


def _build_store(cfg: QuizConfig) -> QuizStore:
    if cfg.storage_backend == "mongo":
        # motor is only needed when Mongo is actually configured
        from quizmaster.storage.mongo_store import MongoQuizStore

        logger.info(f"Using MongoDB store ({cfg.mongodb_db})")
        return MongoQuizStore.from_uri(cfg.mongodb_uri, cfg.mongodb_db)

    logger.info("Using in-memory store")
    return InMemoryQuizStore()


# =============================================================================
# DEPENDENCIES
# =============================================================================


async def get_store() -> QuizStore:
    """Store singleton (backend chosen by QUIZ_STORAGE_BACKEND)."""
    global store
    if store is None:
        store = _build_store(get_config())
    return store


async def get_trivia_client() -> OpenTriviaClient:
    """Open Trivia DB client singleton."""
    global trivia_client
    if trivia_client is None:
        cfg = get_config()
        trivia_client = OpenTriviaClient(
            base_url=cfg.trivia_api_url,
            categories_url=cfg.trivia_categories_url,
            timeout=cfg.trivia_timeout,
        )
    return trivia_client


async def get_pipeline() -> SubmissionPipeline:
    quiz_store = await get_store()
    return SubmissionPipeline(quiz_store, quiz_store, quiz_store)


async def get_generator() -> QuizGenerator:
    return QuizGenerator(await get_trivia_client(), await get_store(), QuestionNormalizer())


# =============================================================================
# LIFECYCLE
# =============================================================================


async def startup() -> None:
    """Create the store eagerly and prepare Mongo indexes."""
    quiz_store = await get_store()
    ensure_indexes = getattr(quiz_store, "ensure_indexes", None)
    if ensure_indexes is not None:
        await ensure_indexes()


async def cleanup() -> None:
    """Release resources on shutdown."""
    global store, trivia_client
    if trivia_client is not None:
        await trivia_client.close()
        trivia_client = None
        logger.info("Trivia client closed")
    if store is not None:
        await store.close()
        store = None
        logger.info("Store closed")


def reset() -> None:
    """Forget every singleton (tests swap config/store between cases)."""
    global config, store, trivia_client
    config = None
    store = None
    trivia_client = None
