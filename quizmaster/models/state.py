"""Session State - In-memory state of one quiz-taking session."""

from dataclasses import dataclass, field
from typing import Any

from .enums import SessionPhase


@dataclass
class SessionState:
    """Complete state of a session in progress.

    Owned by exactly one ``QuizSession``; never persisted mid-session.

    Attributes:
        quiz_id: ID of the quiz being taken
        time_limit_seconds: Countdown start value
        time_left: Seconds remaining
        phase: Lifecycle phase
        current_index: Question currently displayed
        answers: Selected option per question (question index -> option index)
        time_spent: Seconds spent displaying each question (question index -> seconds)
        timed_out: Countdown reached zero
        auto_submit_fired: Auto-submit already triggered (fires once)
        result_id: Result created by a successful submission
        last_error: Message of the last failed submission
    """

    quiz_id: str
    time_limit_seconds: int
    time_left: int = 0
    phase: SessionPhase = SessionPhase.NOT_STARTED
    current_index: int = 0
    answers: dict[int, int] = field(default_factory=dict)
    time_spent: dict[int, int] = field(default_factory=dict)
    timed_out: bool = False
    auto_submit_fired: bool = False
    result_id: str | None = None
    last_error: str | None = None

    def __post_init__(self) -> None:
        if self.time_left == 0 and self.phase is SessionPhase.NOT_STARTED:
            self.time_left = self.time_limit_seconds

    @property
    def elapsed_seconds(self) -> int:
        return self.time_limit_seconds - self.time_left

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    def record_answer(self, question_index: int, option_index: int) -> None:
        """Overwrite the selection for a question."""
        self.answers[question_index] = option_index

    def add_time(self, question_index: int, seconds: int = 1) -> None:
        self.time_spent[question_index] = self.time_spent.get(question_index, 0) + seconds

    def clear(self) -> None:
        """Drop answers and timing (abandonment)."""
        self.answers.clear()
        self.time_spent.clear()
        self.current_index = 0

    def to_dict(self) -> dict[str, Any]:
        """Snapshot for logging/inspection."""
        return {
            "quiz_id": self.quiz_id,
            "time_limit_seconds": self.time_limit_seconds,
            "time_left": self.time_left,
            "phase": self.phase.value,
            "current_index": self.current_index,
            "answers": dict(self.answers),
            "time_spent": dict(self.time_spent),
            "timed_out": self.timed_out,
            "auto_submit_fired": self.auto_submit_fired,
            "result_id": self.result_id,
            "last_error": self.last_error,
        }
