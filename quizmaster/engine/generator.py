"""Quiz Generator - Builds published quizzes from the trivia source."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import IngestionError
from ..models.schemas import GenerateQuizRequest, Quiz
from .normalizer import NormalizationReport, QuestionNormalizer

if TYPE_CHECKING:
    from ..storage.base import QuizRepository
    from ..trivia.client import OpenTriviaClient

logger = logging.getLogger(__name__)


class QuizGenerator:
    """Fetch -> normalize -> save.

    Upstream failures (timeout, non-zero response code) abort the request.
    Bad individual records are skipped unless the request is atomic.

    Example:
        >>> generator = QuizGenerator(trivia, store)
        >>> quiz = await generator.generate(request, created_by="admin-1")
    """

    def __init__(
        self,
        trivia: OpenTriviaClient,
        quizzes: QuizRepository,
        normalizer: QuestionNormalizer | None = None,
    ):
        self.trivia = trivia
        self.quizzes = quizzes
        self.normalizer = normalizer or QuestionNormalizer()

    async def generate(self, request: GenerateQuizRequest, created_by: str) -> Quiz:
        """Generate and persist a quiz.

        Args:
            request: Title, category, difficulty, amount, time limit
            created_by: Id of the requesting user

        Returns:
            Saved, published Quiz

        Raises:
            IngestionError: Upstream failure, atomic batch failure, or no usable questions
        """
        records = await self.trivia.fetch_questions(
            amount=request.amount,
            category=request.category,
            difficulty=request.difficulty,
        )

        report: NormalizationReport = self.normalizer.normalize_batch(records, atomic=request.atomic)

        if not report.questions:
            raise IngestionError(
                "No questions available for the specified criteria",
                {"fetched": len(records), "rejected": len(report.rejected)},
            )

        quiz = Quiz(
            title=request.title,
            description=request.description,
            category=request.category,
            difficulty=request.difficulty,
            questions=report.questions,
            time_limit_minutes=request.time_limit_minutes,
            is_published=True,
            created_by=created_by,
            tags=["generated", "trivia", request.category.value],
        )
        await self.quizzes.save_quiz(quiz)

        logger.info(
            f"[Quiz {quiz.id}] Generated with {len(quiz.questions)} questions "
            f"({len(report.rejected)} rejected), total_points={quiz.total_points}"
        )
        return quiz
