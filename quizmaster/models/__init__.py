"""Quiz Models - Enums, Schemas, Index and Session State."""

from .enums import (
    Grade,
    QuestionDifficulty,
    QuizCategory,
    QuizDifficulty,
    ResultStatus,
    SessionPhase,
    TriviaResponseCode,
    UserRole,
)
from .index import QuizIndex
from .schemas import (
    GenerateQuizRequest,
    Option,
    PublicOption,
    PublicQuestion,
    PublicQuiz,
    Question,
    Quiz,
    Result,
    ResultAnswerDetail,
    ResultDetailResponse,
    ScoredAnswer,
    Submission,
    SubmittedAnswer,
    TriviaRecord,
    UserStats,
)
from .state import SessionState

__all__ = [
    # Enums
    "Grade",
    "QuestionDifficulty",
    "QuizCategory",
    "QuizDifficulty",
    "ResultStatus",
    "SessionPhase",
    "TriviaResponseCode",
    "UserRole",
    # Schemas
    "Option",
    "Question",
    "Quiz",
    "PublicOption",
    "PublicQuestion",
    "PublicQuiz",
    "SubmittedAnswer",
    "Submission",
    "ScoredAnswer",
    "Result",
    "UserStats",
    "TriviaRecord",
    "GenerateQuizRequest",
    "ResultAnswerDetail",
    "ResultDetailResponse",
    # Index / State
    "QuizIndex",
    "SessionState",
]
