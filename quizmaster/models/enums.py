"""Quiz Enums - Difficulty, categories, grades and status values."""

from __future__ import annotations

from enum import Enum


class QuestionDifficulty(str, Enum):
    """Difficulty of a single question."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizDifficulty(str, Enum):
    """Difficulty of a whole quiz."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MIXED = "mixed"


class QuizCategory(str, Enum):
    """Quiz categories (each maps onto an Open Trivia DB category)."""

    TECHNOLOGY = "technology"
    SCIENCE = "science"
    MATHEMATICS = "mathematics"
    HISTORY = "history"
    LITERATURE = "literature"
    SPORTS = "sports"
    GENERAL = "general"
    PROGRAMMING = "programming"


class ResultStatus(str, Enum):
    """How a submission ended."""

    COMPLETED = "completed"  # every question answered
    INCOMPLETE = "incomplete"
    TIMEOUT = "timeout"  # incomplete, forced by the countdown


class Grade(str, Enum):
    """Letter grade derived from the percentage."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D = "D"
    F = "F"


class SessionPhase(str, Enum):
    """Lifecycle of a quiz-taking session."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUBMITTING = "submitting"
    TERMINATED = "terminated"
    ABANDONED = "abandoned"


class UserRole(str, Enum):
    """Caller role supplied by the auth layer."""

    USER = "user"
    ADMIN = "admin"


class TriviaResponseCode(int, Enum):
    """Open Trivia DB ``response_code`` values."""

    SUCCESS = 0
    NO_RESULTS = 1
    INVALID_PARAMETER = 2
    TOKEN_NOT_FOUND = 3
    TOKEN_EMPTY = 4
    UNKNOWN = -1

    @classmethod
    def from_code(cls, code: int) -> "TriviaResponseCode":
        """Map a raw code to a member; undocumented codes become UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    def describe(self, code: int | None = None) -> str:
        """Human-readable message for this response code."""
        if self is TriviaResponseCode.UNKNOWN:
            return f"Unknown error (Code: {code})"
        return TRIVIA_ERROR_MESSAGES[self]


TRIVIA_ERROR_MESSAGES: dict[TriviaResponseCode, str] = {
    TriviaResponseCode.SUCCESS: "Success",
    TriviaResponseCode.NO_RESULTS: (
        "No Results - Could not return results. "
        "The API doesn't have enough questions for your query."
    ),
    TriviaResponseCode.INVALID_PARAMETER: (
        "Invalid Parameter - Contains an invalid parameter. Arguments passed in aren't valid."
    ),
    TriviaResponseCode.TOKEN_NOT_FOUND: "Token Not Found - Session Token does not exist.",
    TriviaResponseCode.TOKEN_EMPTY: (
        "Token Empty - Session Token has returned all possible questions "
        "for the specified query."
    ),
}
