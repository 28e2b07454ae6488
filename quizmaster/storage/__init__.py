"""Quiz Storage - Repository protocols and backends."""

from .base import QuizRepository, QuizStore, ResultRepository, UserStatsRepository
from .memory_store import InMemoryQuizStore

__all__ = [
    "QuizRepository",
    "UserStatsRepository",
    "ResultRepository",
    "QuizStore",
    "InMemoryQuizStore",
]
