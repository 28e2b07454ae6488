# =============================================================================
# CONFIGURATION - Quiz Master
# =============================================================================
# Centralised settings read from environment variables (and .env)
# =============================================================================

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

DEFAULT_TRIVIA_API_URL = "https://opentdb.com/api.php"
DEFAULT_TRIVIA_CATEGORIES_URL = "https://opentdb.com/api_category.php"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class QuizConfig:
    """Runtime configuration.

    Attributes:
        storage_backend: ``memory`` or ``mongo``
        mongodb_uri: Connection string used by the Mongo store
        mongodb_db: Database name used by the Mongo store
        trivia_api_url: Open Trivia DB question endpoint
        trivia_categories_url: Open Trivia DB category endpoint
        trivia_timeout: Request timeout (seconds) for question fetches
        cors_origins: Allowed CORS origins
        log_level: Logging level name
    """

    storage_backend: str = "memory"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "quizmaster"
    trivia_api_url: str = DEFAULT_TRIVIA_API_URL
    trivia_categories_url: str = DEFAULT_TRIVIA_CATEGORIES_URL
    trivia_timeout: float = 10.0
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "QuizConfig":
        """Build config from environment variables.

        Args:
            load_dotenv_file: Also read a ``.env`` file from the working directory

        Returns:
            QuizConfig populated from the environment, defaults elsewhere
        """
        if load_dotenv_file:
            load_dotenv(find_dotenv(usecwd=True))

        defaults = cls()
        backend = os.getenv("QUIZ_STORAGE_BACKEND", defaults.storage_backend).lower()
        if backend not in ("memory", "mongo"):
            raise ValueError(f"Invalid QUIZ_STORAGE_BACKEND: {backend!r} (use 'memory' or 'mongo')")

        cors = os.getenv("CORS_ORIGINS")

        return cls(
            storage_backend=backend,
            mongodb_uri=os.getenv("MONGODB_URI", defaults.mongodb_uri),
            mongodb_db=os.getenv("MONGODB_DB", defaults.mongodb_db),
            trivia_api_url=os.getenv("TRIVIA_API_URL", defaults.trivia_api_url),
            trivia_categories_url=os.getenv(
                "TRIVIA_CATEGORIES_URL", defaults.trivia_categories_url
            ),
            trivia_timeout=float(os.getenv("TRIVIA_TIMEOUT", str(defaults.trivia_timeout))),
            cors_origins=_split_csv(cors) if cors else defaults.cors_origins,
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )

    @property
    def log_level_value(self) -> int:
        """Numeric logging level (falls back to INFO)."""
        return getattr(logging, self.log_level, logging.INFO)
