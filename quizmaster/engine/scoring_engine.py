"""Quiz Scoring Engine - Answer resolution, scoring and grading."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..models.enums import Grade, ResultStatus
from ..models.schemas import Quiz, Result, ScoredAnswer, Submission, SubmittedAnswer


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going up (``round()`` would round half to even)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class QuizScoringEngine:
    """Scoring and grading engine.

    Resolves submitted answers against the authoritative quiz, awards the
    question's points for each correct answer and grades the percentage.
    Scoring is a pure function of (quiz, submission); persistence is done by
    ``SubmissionPipeline``.

    Grade bands (inclusive lower bound):
        - 95+: A+
        - 90+: A
        - 85+: B+
        - 80+: B
        - 75+: C+
        - 70+: C
        - 60+: D
        - below 60: F

    Example:
        >>> engine = QuizScoringEngine()
        >>> engine.calculate_grade(91)
        <Grade.A: 'A'>
    """

    GRADE_THRESHOLDS = [
        (95, Grade.A_PLUS),
        (90, Grade.A),
        (85, Grade.B_PLUS),
        (80, Grade.B),
        (75, Grade.C_PLUS),
        (70, Grade.C),
        (60, Grade.D),
        (0, Grade.F),
    ]

    FEEDBACK_THRESHOLDS = [
        (90, "Excellent work! Outstanding performance!"),
        (80, "Great job! Very good performance!"),
        (70, "Good work! Keep practicing to improve!"),
        (60, "Fair performance. Consider reviewing the material."),
        (0, "Needs improvement. Please review the topics and try again."),
    ]

    def calculate_grade(self, percentage: float) -> Grade:
        """Letter grade for a percentage (0-100)."""
        for threshold, grade in self.GRADE_THRESHOLDS:
            if percentage >= threshold:
                return grade
        return Grade.F

    def feedback_for(self, percentage: float) -> str:
        """Fixed feedback message for a percentage."""
        for threshold, message in self.FEEDBACK_THRESHOLDS:
            if percentage >= threshold:
                return message
        return self.FEEDBACK_THRESHOLDS[-1][1]

    def calculate_percentage(self, score: int, total_points: int) -> float:
        if total_points <= 0:
            return 0.0
        return min(100.0, round_half_up(score / total_points * 100))

    def evaluate_answer(self, quiz: Quiz, answer: SubmittedAnswer) -> ScoredAnswer:
        """Resolve one answer.

        Unknown question ids and options that do not belong to the question are
        scored as wrong (0 points) instead of failing the submission.
        """
        question, option = quiz.index.resolve(answer.question_id, answer.selected_option_id)
        is_correct = bool(question and option and option.is_correct)

        return ScoredAnswer(
            question_id=answer.question_id,
            selected_option_id=answer.selected_option_id,
            is_correct=is_correct,
            points=question.points if is_correct else 0,
            time_spent_seconds=answer.time_spent_seconds,
        )

    def determine_status(self, quiz: Quiz, answered_ids: set[str], timed_out: bool) -> ResultStatus:
        if all(q.id in answered_ids for q in quiz.questions):
            return ResultStatus.COMPLETED
        return ResultStatus.TIMEOUT if timed_out else ResultStatus.INCOMPLETE

    def score(self, quiz: Quiz, submission: Submission, user_id: str) -> Result:
        """Score a submission against its quiz.

        Args:
            quiz: Authoritative quiz (with correct flags)
            submission: Answers produced by the session
            user_id: Submitting user

        Returns:
            New, immutable Result
        """
        # Last answer for a question wins, in submission order
        latest: dict[str, SubmittedAnswer] = {}
        for answer in submission.answers:
            latest.pop(answer.question_id, None)
            latest[answer.question_id] = answer

        scored = [self.evaluate_answer(quiz, answer) for answer in latest.values()]

        score = sum(a.points for a in scored)
        correct_answers = sum(1 for a in scored if a.is_correct)
        percentage = self.calculate_percentage(score, quiz.total_points)

        answered_ids = {a.question_id for a in scored if a.question_id in quiz.index.questions}

        return Result(
            user_id=user_id,
            quiz_id=quiz.id,
            answers=tuple(scored),
            score=score,
            total_questions=len(quiz.questions),
            correct_answers=correct_answers,
            percentage=percentage,
            total_time_seconds=submission.total_time_seconds,
            status=self.determine_status(quiz, answered_ids, submission.timed_out),
            grade=self.calculate_grade(percentage),
            feedback=self.feedback_for(percentage),
        )
