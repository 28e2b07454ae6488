"""Submission Pipeline - Submission -> persisted Result + aggregate updates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import QuizNotFoundError, QuizNotPublishedError
from .scoring_engine import QuizScoringEngine
from .stats_engine import StatisticsAggregator

if TYPE_CHECKING:
    from ..models.schemas import Result, Submission
    from ..storage.base import QuizRepository, ResultRepository, UserStatsRepository

logger = logging.getLogger(__name__)


class SubmissionPipeline:
    """Scores a submission and records its consequences.

    Steps:
        1. Load the quiz; reject missing or unpublished quizzes (no Result)
        2. Score the answers (pure, ``QuizScoringEngine``)
        3. Persist the Result (insert-only)
        4. Update quiz and user aggregates (``StatisticsAggregator``); a failure
           here is logged and re-raised with the Result already persisted

    Retried submissions are not deduplicated here; each call creates a new
    Result.

    Example:
        >>> pipeline = SubmissionPipeline(store, store, store)
        >>> result = await pipeline.submit(submission, user_id="u1")
    """

    def __init__(
        self,
        quizzes: QuizRepository,
        results: ResultRepository,
        users: UserStatsRepository,
        scoring: QuizScoringEngine | None = None,
        aggregator: StatisticsAggregator | None = None,
    ):
        self.quizzes = quizzes
        self.results = results
        self.users = users
        self.scoring = scoring or QuizScoringEngine()
        self.aggregator = aggregator or StatisticsAggregator(quizzes, users)

    async def submit(self, submission: Submission, user_id: str) -> Result:
        """Score and persist a submission.

        Raises:
            QuizNotFoundError: Quiz does not exist
            QuizNotPublishedError: Quiz is not published
        """
        quiz = await self.quizzes.find_quiz_by_id(submission.quiz_id)
        if quiz is None:
            raise QuizNotFoundError("Quiz not found", {"quiz_id": submission.quiz_id})
        if not quiz.is_published:
            raise QuizNotPublishedError("Quiz is not published", {"quiz_id": quiz.id})

        result = self.scoring.score(quiz, submission, user_id)
        await self.results.save_result(result)
        try:
            await self.aggregator.record(result)
        except Exception as e:
            # The Result stays persisted; aggregates may be partially updated
            logger.error(
                f"[Quiz {quiz.id}] Result {result.id} saved but statistics update failed: {e}"
            )
            raise

        logger.info(
            f"[Quiz {quiz.id}] Result {result.id} for user {user_id}: "
            f"{result.score}/{quiz.total_points} ({result.percentage:.0f}%, {result.grade.value}, "
            f"{result.status.value})"
        )
        return result
