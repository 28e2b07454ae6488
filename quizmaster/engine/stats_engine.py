"""Statistics Aggregator - Incremental per-quiz and per-user aggregates."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .scoring_engine import round_half_up

if TYPE_CHECKING:
    from ..models.schemas import Result
    from ..storage.base import QuizRepository, UserStatsRepository

logger = logging.getLogger(__name__)


def next_average(previous_average: float, previous_count: int, new_value: float) -> float:
    """Incremental mean after adding ``new_value``, rounded to 2 decimals.

    Only the prior aggregate is needed, never the full history.
    """
    count = previous_count + 1
    return round_half_up((previous_average * previous_count + new_value) / count, 2)


class StatisticsAggregator:
    """Applies one Result to the quiz and user running aggregates.

    Both updates are delegated to atomic store operations so concurrent
    submissions against the same quiz or user cannot lose an update. The two
    updates touch different documents and run concurrently.

    Example:
        >>> aggregator = StatisticsAggregator(store, store)
        >>> await aggregator.record(result)
    """

    def __init__(self, quizzes: QuizRepository, users: UserStatsRepository):
        self.quizzes = quizzes
        self.users = users

    async def record(self, result: Result) -> None:
        """Update both aggregates for a freshly created result."""
        await asyncio.gather(
            self.quizzes.increment_quiz_stats(result.quiz_id, result.percentage),
            self.users.increment_user_stats(
                result.user_id,
                score=result.score,
                total_questions=result.total_questions,
                correct_answers=result.correct_answers,
                percentage=result.percentage,
            ),
        )
        logger.debug(f"Stats updated for quiz {result.quiz_id} / user {result.user_id}")
