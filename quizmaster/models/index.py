"""Quiz Index - Id lookup tables for questions and options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schemas import Option, Question, Quiz


@dataclass(frozen=True)
class QuizIndex:
    """Questions and options of one quiz keyed by id.

    Built once when a quiz is loaded so answer resolution never scans the
    embedded question/option lists.

    Example:
        >>> index = QuizIndex.from_quiz(quiz)
        >>> question, option = index.resolve("q1", "o3")
    """

    questions: dict[str, Question] = field(default_factory=dict)
    options: dict[str, dict[str, Option]] = field(default_factory=dict)

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizIndex":
        return cls(
            questions={q.id: q for q in quiz.questions},
            options={q.id: {o.id: o for o in q.options} for q in quiz.questions},
        )

    def question(self, question_id: str) -> Question | None:
        return self.questions.get(question_id)

    def option(self, question_id: str, option_id: str) -> Option | None:
        """Option ``option_id`` if it belongs to question ``question_id``."""
        return self.options.get(question_id, {}).get(option_id)

    def resolve(self, question_id: str, option_id: str) -> tuple[Question | None, Option | None]:
        return self.question(question_id), self.option(question_id, option_id)

    def __len__(self) -> int:
        return len(self.questions)
