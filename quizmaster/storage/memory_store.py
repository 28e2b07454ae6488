"""In-Memory Store - KV-style store for development and tests."""

from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Any

from ..engine.stats_engine import next_average
from ..exceptions import DuplicateResultError, QuizNotFoundError
from ..models.schemas import Quiz, Result, UserStats
from .base import QuizStore

logger = logging.getLogger(__name__)


class InMemoryQuizStore(QuizStore):
    """Quiz/result/user store kept in a process-local dict.

    Documents are stored serialized so callers always get independent copies.
    Aggregate updates run read-compute-write under a per-document
    ``asyncio.Lock``, which makes them atomic for every coroutine in the loop.

    Key structure:
        - quiz:{quiz_id} -> Quiz
        - result:{result_id} -> Result
        - user:{user_id}:stats -> UserStats

    Example:
        >>> store = InMemoryQuizStore()
        >>> await store.save_quiz(quiz)
        >>> await store.increment_quiz_stats(quiz.id, 80.0)
    """

    KEY_PREFIX_QUIZ = "quiz"
    KEY_PREFIX_RESULT = "result"
    KEY_PREFIX_USER = "user"

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}
        # A lock lives only while some coroutine holds or waits on it
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _quiz_key(self, quiz_id: str) -> str:
        return f"{self.KEY_PREFIX_QUIZ}:{quiz_id}"

    def _result_key(self, result_id: str) -> str:
        return f"{self.KEY_PREFIX_RESULT}:{result_id}"

    def _user_key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX_USER}:{user_id}:stats"

    async def _pause(self) -> None:
        """Suspension point between reading and writing an aggregate."""
        await asyncio.sleep(0)

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    async def find_quiz_by_id(self, quiz_id: str) -> Quiz | None:
        data = self._data.get(self._quiz_key(quiz_id))
        if data is None:
            logger.debug(f"Quiz not found: {quiz_id}")
            return None
        return Quiz.model_validate(data)

    async def save_quiz(self, quiz: Quiz) -> Quiz:
        key = self._quiz_key(quiz.id)
        async with self._lock(key):
            self._data[key] = quiz.model_dump(mode="json")
        logger.debug(f"Quiz saved: {quiz.id}")
        return quiz

    async def increment_quiz_stats(self, quiz_id: str, percentage: float) -> None:
        key = self._quiz_key(quiz_id)
        async with self._lock(key):
            data = self._data.get(key)
            if data is None:
                raise QuizNotFoundError(f"Quiz {quiz_id} not found", {"quiz_id": quiz_id})

            attempts = data["attempts"]
            average = data["average_score"]
            await self._pause()

            data["average_score"] = next_average(average, attempts, percentage)
            data["attempts"] = attempts + 1

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def increment_user_stats(
        self,
        user_id: str,
        score: int,
        total_questions: int,
        correct_answers: int = 0,
        percentage: float = 0.0,
    ) -> None:
        key = self._user_key(user_id)
        async with self._lock(key):
            data = self._data.get(key) or UserStats(user_id=user_id).model_dump(mode="json")
            await self._pause()

            data["average_score"] = next_average(
                data["average_score"], data["quizzes_taken"], percentage
            )
            data["quizzes_taken"] += 1
            data["total_score"] += score
            data["total_correct"] += correct_answers
            data["total_questions"] += total_questions
            data["highest_score"] = max(data.get("highest_score", 0.0), percentage)
            self._data[key] = data

    async def get_user_stats(self, user_id: str) -> UserStats | None:
        data = self._data.get(self._user_key(user_id))
        return UserStats.model_validate(data) if data is not None else None

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    async def save_result(self, result: Result) -> Result:
        key = self._result_key(result.id)
        if key in self._data:
            raise DuplicateResultError(
                f"Result {result.id} already exists", {"result_id": result.id}
            )
        self._data[key] = result.model_dump(mode="json")
        return result

    async def find_result_by_id(self, result_id: str) -> Result | None:
        data = self._data.get(self._result_key(result_id))
        return Result.model_validate(data) if data is not None else None

    async def list_results_for_user(self, user_id: str, limit: int = 10) -> list[Result]:
        prefix = f"{self.KEY_PREFIX_RESULT}:"
        results = [
            Result.model_validate(data)
            for key, data in self._data.items()
            if key.startswith(prefix) and data["user_id"] == user_id
        ]
        results.sort(key=lambda r: r.created_at, reverse=True)
        return results[:limit]

    async def close(self) -> None:
        self._data.clear()
