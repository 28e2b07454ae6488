"""Quiz Exceptions - Domain error hierarchy.

Every error carries a human-readable ``message`` and a ``details`` dict so the
router can surface a specific message without string matching.
"""

from __future__ import annotations

from typing import Any


class QuizError(Exception):
    """Base error for the quiz engine."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# INGESTION
# =============================================================================


class IngestionError(QuizError):
    """Failure while turning trivia data into quiz questions."""


class MalformedTriviaRecordError(IngestionError):
    """Raw trivia record is missing fields or has the wrong shape."""


class CorrectAnswerNotFoundError(IngestionError):
    """Decoded correct answer does not match any candidate option."""


class AmbiguousCorrectAnswerError(IngestionError):
    """Decoded correct answer matches more than one candidate option."""


class TriviaAPIError(IngestionError):
    """Trivia source answered with a non-zero response code."""

    def __init__(self, code: int, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, {"response_code": code, **(details or {})})
        self.code = code


class TriviaTimeoutError(IngestionError):
    """Trivia source did not answer within the request timeout."""


class TriviaTransportError(IngestionError):
    """Network or HTTP-level failure talking to the trivia source."""


# =============================================================================
# QUIZ / RESULT LOOKUP
# =============================================================================


class QuizNotFoundError(QuizError):
    """Referenced quiz does not exist."""


class QuizNotPublishedError(QuizError):
    """Referenced quiz exists but is not published."""


class DuplicateResultError(QuizError):
    """A result with the same id was already persisted."""


# =============================================================================
# SESSION
# =============================================================================


class SessionStateError(QuizError):
    """Action not allowed in the current session phase."""


class SubmissionError(QuizError):
    """Submission could not be delivered to the scoring endpoint."""
