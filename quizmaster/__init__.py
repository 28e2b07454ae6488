"""Quiz Master - Timed quizzes, trivia ingestion and scoring.

Architecture:
- models/: Enums, Pydantic schemas, QuizIndex, SessionState
- engine/: Normalizer, ScoringEngine, StatisticsAggregator, SubmissionPipeline,
  QuizGenerator, QuizSession
- trivia/: Open Trivia DB client
- storage/: Repository protocols, in-memory and MongoDB stores
- client.py: HTTP client for quiz takers
- router.py: FastAPI endpoints
"""

from .config import QuizConfig
from .engine import (
    QuestionNormalizer,
    QuizGenerator,
    QuizScoringEngine,
    QuizSession,
    StatisticsAggregator,
    SubmissionPipeline,
)
from .exceptions import QuizError
from .models import PublicQuiz, Question, Quiz, Result, Submission
from .storage import InMemoryQuizStore, QuizStore

__version__ = "1.0.0"

__all__ = [
    # Config
    "QuizConfig",
    # Models
    "Question",
    "Quiz",
    "PublicQuiz",
    "Submission",
    "Result",
    # Engines
    "QuestionNormalizer",
    "QuizScoringEngine",
    "StatisticsAggregator",
    "SubmissionPipeline",
    "QuizGenerator",
    "QuizSession",
    # Storage
    "QuizStore",
    "InMemoryQuizStore",
    # Errors
    "QuizError",
]
