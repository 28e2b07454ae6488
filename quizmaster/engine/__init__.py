"""Quiz Engines - Normalization, scoring, statistics, generation and sessions."""

from .generator import QuizGenerator
from .normalizer import NormalizationReport, QuestionNormalizer, RejectedRecord, decode_html
from .pipeline import SubmissionPipeline
from .scoring_engine import QuizScoringEngine, round_half_up
from .session import QuizSession, run_countdown
from .stats_engine import StatisticsAggregator, next_average

__all__ = [
    "QuestionNormalizer",
    "NormalizationReport",
    "RejectedRecord",
    "decode_html",
    "QuizScoringEngine",
    "round_half_up",
    "StatisticsAggregator",
    "next_average",
    "SubmissionPipeline",
    "QuizGenerator",
    "QuizSession",
    "run_countdown",
]
