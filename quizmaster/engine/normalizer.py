"""Question Normalizer - Turns raw trivia records into quiz questions."""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import ValidationError

from ..exceptions import (
    AmbiguousCorrectAnswerError,
    CorrectAnswerNotFoundError,
    IngestionError,
    MalformedTriviaRecordError,
)
from ..models.enums import QuestionDifficulty
from ..models.schemas import Option, Question, TriviaRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#039;": "'",
    "&ldquo;": '"',
    "&rdquo;": '"',
    "&rsquo;": "'",
    "&lsquo;": "'",
    "&hellip;": "...",
    "&ndash;": "–",
    "&mdash;": "—",
}

_ENTITY_RE = re.compile(r"&[#\w]+;")


def decode_html(text: str) -> str:
    """Decode the known HTML entities; unknown entities pass through unchanged."""
    return _ENTITY_RE.sub(lambda m: HTML_ENTITIES.get(m.group(0), m.group(0)), text)


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of ``items``."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


@dataclass
class RejectedRecord:
    """A record that could not be normalized."""

    index: int
    reason: str
    error: IngestionError


@dataclass
class NormalizationReport:
    """Outcome of a batch normalization."""

    questions: list[Question] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


class QuestionNormalizer:
    """Converts Open Trivia DB records into verified ``Question`` objects.

    Guarantees per question:
        - text and answers decoded to plain text
        - options shuffled with an unbiased Fisher-Yates shuffle
        - exactly one option marked correct

    Points by difficulty:
        - easy: 1 point
        - medium: 2 points
        - hard: 3 points
        - anything else: 1 point

    Example:
        >>> normalizer = QuestionNormalizer(rng=random.Random(7))
        >>> question = normalizer.normalize({
        ...     "question": "2 &amp; 2?", "correct_answer": "4",
        ...     "incorrect_answers": ["3", "5", "22"], "difficulty": "easy",
        ... })
        >>> question.correct_option.text
        '4'
    """

    POINTS = {
        QuestionDifficulty.EASY: 1,
        QuestionDifficulty.MEDIUM: 2,
        QuestionDifficulty.HARD: 3,
    }
    DEFAULT_POINTS = 1

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @staticmethod
    def parse_difficulty(value: str) -> QuestionDifficulty | None:
        try:
            return QuestionDifficulty(value.strip().lower())
        except (AttributeError, ValueError):
            return None

    def get_points_for_difficulty(self, difficulty: str | QuestionDifficulty | None) -> int:
        """Points for a difficulty (unknown -> 1)."""
        if not isinstance(difficulty, QuestionDifficulty):
            difficulty = self.parse_difficulty(difficulty or "")
        return self.POINTS.get(difficulty, self.DEFAULT_POINTS)

    def _parse_record(self, raw: Mapping[str, Any] | TriviaRecord) -> TriviaRecord:
        if isinstance(raw, TriviaRecord):
            return raw
        if not isinstance(raw, Mapping):
            raise MalformedTriviaRecordError(
                f"Trivia record must be an object, got {type(raw).__name__}"
            )
        try:
            return TriviaRecord.model_validate(raw)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise MalformedTriviaRecordError(
                f"Malformed trivia record: invalid field(s) {', '.join(fields)}",
                details={"fields": fields},
            ) from e

    def normalize(self, raw: Mapping[str, Any] | TriviaRecord) -> Question:
        """Normalize a single trivia record.

        Args:
            raw: Record as returned by the trivia API

        Returns:
            Question with shuffled options and exactly one correct option

        Raises:
            MalformedTriviaRecordError: Missing/invalid fields
            CorrectAnswerNotFoundError: Correct answer absent after decoding
            AmbiguousCorrectAnswerError: Correct answer matches several options
        """
        record = self._parse_record(raw)

        text = decode_html(record.question)
        correct_text = decode_html(record.correct_answer)
        candidates = [correct_text] + [decode_html(a) for a in record.incorrect_answers]

        shuffled = fisher_yates_shuffle(candidates, self._rng)

        matches = [i for i, candidate in enumerate(shuffled) if candidate == correct_text]
        if not matches:
            raise CorrectAnswerNotFoundError(
                f"Correct answer {correct_text!r} not found among options",
                details={"question": text},
            )
        if len(matches) > 1:
            raise AmbiguousCorrectAnswerError(
                f"Correct answer {correct_text!r} appears {len(matches)} times among options",
                details={"question": text},
            )

        difficulty = self.parse_difficulty(record.difficulty)
        try:
            return Question(
                text=text,
                options=[
                    Option(text=candidate, is_correct=(i == matches[0]))
                    for i, candidate in enumerate(shuffled)
                ],
                explanation=f"The correct answer is: {correct_text}",
                difficulty=difficulty or QuestionDifficulty.MEDIUM,
                points=self.get_points_for_difficulty(difficulty),
            )
        except ValidationError as e:
            raise MalformedTriviaRecordError(
                f"Trivia record does not fit the question schema: {e.error_count()} error(s)",
                details={"question": text},
            ) from e

    def normalize_batch(
        self,
        records: Sequence[Mapping[str, Any] | TriviaRecord],
        atomic: bool = False,
    ) -> NormalizationReport:
        """Normalize many records.

        Args:
            records: Raw trivia records
            atomic: Raise on the first bad record instead of skipping it

        Returns:
            NormalizationReport with the questions and the rejected records
        """
        report = NormalizationReport()

        for index, raw in enumerate(records):
            try:
                report.questions.append(self.normalize(raw))
            except IngestionError as e:
                if atomic:
                    logger.error(f"Batch aborted at record {index}: {e}")
                    raise
                logger.warning(f"Trivia record {index} rejected: {e}")
                report.rejected.append(RejectedRecord(index=index, reason=str(e), error=e))

        return report
