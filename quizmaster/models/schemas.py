"""Quiz Schemas - Pydantic models for quizzes, submissions and results."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from .enums import (
    Grade,
    QuestionDifficulty,
    QuizCategory,
    QuizDifficulty,
    ResultStatus,
)

if TYPE_CHECKING:
    from .index import QuizIndex

MIN_OPTIONS = 2
MAX_OPTIONS = 6


def new_id() -> str:
    """Generate a document/sub-document identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# QUESTIONS
# =============================================================================


class Option(BaseModel):
    """Multiple-choice option (authoritative, with the correct flag)."""

    id: str = Field(default_factory=new_id, description="Option id, unique in its question")
    text: str = Field(..., min_length=1, max_length=200, description="Option text")
    is_correct: bool = Field(default=False, description="Whether this is the right answer")


class Question(BaseModel):
    """Question with 2-6 options, exactly one of them correct."""

    id: str = Field(default_factory=new_id, description="Question id, unique in its quiz")
    text: str = Field(..., min_length=1, max_length=500, description="Question prompt")
    options: list[Option] = Field(
        ..., min_length=MIN_OPTIONS, max_length=MAX_OPTIONS, description="2-6 options"
    )
    explanation: str = Field(default="", max_length=1000, description="Why the answer is right")
    difficulty: QuestionDifficulty = Field(default=QuestionDifficulty.MEDIUM)
    points: int = Field(default=1, ge=1, le=10, description="Points awarded if correct")

    @model_validator(mode="after")
    def _check_options(self) -> "Question":
        correct = sum(1 for option in self.options if option.is_correct)
        if correct != 1:
            raise ValueError(f"Question must have exactly one correct option, found {correct}")

        ids = [option.id for option in self.options]
        if len(set(ids)) != len(ids):
            raise ValueError("Option ids must be unique within a question")
        return self

    @property
    def correct_option(self) -> Option:
        return next(option for option in self.options if option.is_correct)

    def to_public(self) -> "PublicQuestion":
        """Answer-hidden projection for quiz takers."""
        return PublicQuestion(
            id=self.id,
            text=self.text,
            options=[PublicOption(id=o.id, text=o.text) for o in self.options],
            difficulty=self.difficulty,
            points=self.points,
        )


class PublicOption(BaseModel):
    """Option as seen by a quiz taker (no correct flag)."""

    id: str
    text: str


class PublicQuestion(BaseModel):
    """Question as seen by a quiz taker (no correct flag, no explanation)."""

    id: str
    text: str
    options: list[PublicOption]
    difficulty: QuestionDifficulty
    points: int


# =============================================================================
# QUIZ
# =============================================================================


class QuizBase(BaseModel):
    """Fields shared by the authoritative quiz and its sanitized projection."""

    id: str = Field(default_factory=new_id)
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: QuizCategory
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    time_limit_minutes: int = Field(default=30, ge=1, le=180)
    is_published: bool = False
    total_points: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)
    average_score: float = Field(default=0.0, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, tags: list[str]) -> list[str]:
        return [tag.strip().lower() for tag in tags if tag.strip()]

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit_minutes * 60


class Quiz(QuizBase):
    """Authoritative quiz (correct answers included).

    ``total_points`` is always recomputed from the questions; ``attempts`` and
    ``average_score`` are only moved by the statistics aggregator.
    """

    questions: list[Question] = Field(..., min_length=1, description="At least one question")

    _index: Any = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _recompute_totals(self) -> "Quiz":
        ids = [question.id for question in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("Question ids must be unique within a quiz")

        self.total_points = sum(question.points for question in self.questions)
        return self

    @property
    def index(self) -> QuizIndex:
        """Id lookup tables, built once per loaded quiz."""
        if self._index is None:
            from .index import QuizIndex

            self._index = QuizIndex.from_quiz(self)
        return self._index

    def with_questions(self, questions: list[Question]) -> "Quiz":
        """Return a copy holding ``questions`` (totals recomputed)."""
        data = self.model_dump()
        data["questions"] = questions
        return Quiz.model_validate(data)

    def for_taker(self) -> "PublicQuiz":
        """Answer-hidden projection handed to the session."""
        data = self.model_dump(exclude={"questions"})
        return PublicQuiz(**data, questions=[q.to_public() for q in self.questions])

    def view_for(self, can_see_answers: bool) -> "Quiz | PublicQuiz":
        return self if can_see_answers else self.for_taker()


class PublicQuiz(QuizBase):
    """Quiz as seen by a taker."""

    questions: list[PublicQuestion] = Field(..., min_length=1)


# =============================================================================
# SUBMISSION & RESULT
# =============================================================================


class SubmittedAnswer(BaseModel):
    """One answer inside a submission."""

    question_id: str
    selected_option_id: str
    time_spent_seconds: int = Field(default=0, ge=0)


class Submission(BaseModel):
    """Answers produced by a session, consumed once by the scoring pipeline."""

    quiz_id: str
    answers: list[SubmittedAnswer] = Field(default_factory=list)
    total_time_seconds: int = Field(..., ge=0)
    timed_out: bool = Field(default=False, description="Submitted by the countdown, not the user")


class ScoredAnswer(BaseModel):
    """Answer after resolution against the authoritative quiz."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    selected_option_id: str
    is_correct: bool
    points: int = 0
    time_spent_seconds: int = 0


class Result(BaseModel):
    """Scored outcome of one submission. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    user_id: str
    quiz_id: str
    answers: tuple[ScoredAnswer, ...] = ()
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=0)
    correct_answers: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    total_time_seconds: int = Field(..., ge=0)
    status: ResultStatus
    grade: Grade
    feedback: str
    created_at: datetime = Field(default_factory=utcnow)


class UserStats(BaseModel):
    """Running per-user aggregate."""

    user_id: str
    quizzes_taken: int = 0
    total_score: int = 0
    total_correct: int = 0
    total_questions: int = 0
    average_score: float = 0.0
    highest_score: float = 0.0


# =============================================================================
# TRIVIA
# =============================================================================


class TriviaRecord(BaseModel):
    """Raw question as returned by Open Trivia DB."""

    model_config = ConfigDict(extra="ignore")

    question: str = Field(..., min_length=1)
    correct_answer: str = Field(..., min_length=1)
    incorrect_answers: list[str] = Field(..., min_length=MIN_OPTIONS - 1, max_length=MAX_OPTIONS - 1)
    difficulty: str = ""
    category: str = ""
    type: str = "multiple"


# =============================================================================
# REQUEST / RESPONSE
# =============================================================================


class GenerateQuizRequest(BaseModel):
    """Request to build a quiz from the trivia source."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: QuizCategory = QuizCategory.GENERAL
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    amount: int = Field(default=15, ge=1, le=50, description="Number of questions")
    time_limit_minutes: int = Field(default=30, ge=1, le=180)
    atomic: bool = Field(default=False, description="Reject the whole batch on any bad record")


class ResultAnswerDetail(ScoredAnswer):
    """Scored answer enriched with question/option text for review."""

    question_text: str = ""
    selected_answer: str = "No answer selected"
    correct_answer: str = "Unknown"
    explanation: str = ""


class ResultDetailResponse(BaseModel):
    """Result with enriched answers."""

    result: Result
    answers: list[ResultAnswerDetail]
