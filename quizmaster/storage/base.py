"""Storage Protocols - Boundary with quiz, result and user persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.schemas import Quiz, Result, UserStats


class QuizRepository(ABC):
    """Quiz documents."""

    @abstractmethod
    async def find_quiz_by_id(self, quiz_id: str) -> Quiz | None:
        """Quiz by id, or None."""

    @abstractmethod
    async def save_quiz(self, quiz: Quiz) -> Quiz:
        """Insert or replace a quiz. Aggregates are not touched by callers."""

    @abstractmethod
    async def increment_quiz_stats(self, quiz_id: str, percentage: float) -> None:
        """Atomically ``attempts += 1`` and fold ``percentage`` into ``average_score``."""


class UserStatsRepository(ABC):
    """Per-user running aggregates."""

    @abstractmethod
    async def increment_user_stats(
        self,
        user_id: str,
        score: int,
        total_questions: int,
        correct_answers: int = 0,
        percentage: float = 0.0,
    ) -> None:
        """Atomically fold one result into the user's aggregate (created on first use)."""

    @abstractmethod
    async def get_user_stats(self, user_id: str) -> UserStats | None:
        """Aggregate for a user, or None."""


class ResultRepository(ABC):
    """Results (insert-only)."""

    @abstractmethod
    async def save_result(self, result: Result) -> Result:
        """Persist a new result. Raises DuplicateResultError if the id exists."""

    @abstractmethod
    async def find_result_by_id(self, result_id: str) -> Result | None:
        """Result by id, or None."""

    @abstractmethod
    async def list_results_for_user(self, user_id: str, limit: int = 10) -> list[Result]:
        """Most recent results of a user, newest first."""


class QuizStore(QuizRepository, UserStatsRepository, ResultRepository):
    """One backend serving every repository."""

    async def close(self) -> None:
        """Release backend resources."""
