# =============================================================================
# CONFTEST - Shared fixtures for all tests
# =============================================================================
# Quizzes, trivia records, stores and app state
# =============================================================================

import asyncio
import random
from typing import Any

import pytest

# =============================================================================
# QUIZ FIXTURES
# =============================================================================


@pytest.fixture
def quiz_factory():
    """Build quizzes with predictable ids.

    Question ``n`` has id ``q{n}`` and options ``q{n}-a``..; option ``a`` is
    always the correct one.
    """
    from quizmaster.models.schemas import Option, Question, Quiz

    def _build(
        points: list[int] | None = None,
        options_per_question: int = 4,
        is_published: bool = True,
        created_by: str = "creator-1",
        quiz_id: str = "quiz-1",
        time_limit_minutes: int = 10,
    ) -> Quiz:
        points = points if points is not None else [1, 2]
        questions = []
        for n, value in enumerate(points, start=1):
            options = [
                Option(id=f"q{n}-{letter}", text=f"Answer {n}{letter}", is_correct=(letter == "a"))
                for letter in "abcdef"[:options_per_question]
            ]
            questions.append(
                Question(
                    id=f"q{n}",
                    text=f"Question {n}?",
                    options=options,
                    explanation=f"The correct answer is: Answer {n}a",
                    points=value,
                )
            )
        return Quiz(
            id=quiz_id,
            title="Sample Quiz",
            description="Quiz used in tests",
            category="general",
            questions=questions,
            time_limit_minutes=time_limit_minutes,
            is_published=is_published,
            created_by=created_by,
        )

    return _build


@pytest.fixture
def two_question_quiz(quiz_factory):
    """Published quiz: q1 worth 1 point, q2 worth 2 points (total 3)."""
    return quiz_factory(points=[1, 2])


@pytest.fixture
def ten_question_quiz(quiz_factory):
    """Published quiz with 10 one-point questions."""
    return quiz_factory(points=[1] * 10, quiz_id="quiz-10")


# =============================================================================
# TRIVIA FIXTURES
# =============================================================================


@pytest.fixture
def trivia_record() -> dict[str, Any]:
    """Raw Open Trivia DB record (HTML-encoded)."""
    return {
        "type": "multiple",
        "difficulty": "hard",
        "category": "Science: Computers",
        "question": "What does &quot;HTTP&quot; stand for?",
        "correct_answer": "HyperText Transfer Protocol",
        "incorrect_answers": [
            "High Transfer Text Protocol",
            "Hyperlink &amp; Text Protocol",
            "Home Tool Transfer Protocol",
        ],
    }


@pytest.fixture
def trivia_payload(trivia_record) -> dict[str, Any]:
    """Successful API payload with one record per difficulty."""
    easy = {**trivia_record, "difficulty": "easy", "question": "Easy one?"}
    medium = {**trivia_record, "difficulty": "medium", "question": "Medium one?"}
    return {"response_code": 0, "results": [easy, medium, trivia_record]}


@pytest.fixture
def normalizer():
    """Normalizer with a seeded RNG."""
    from quizmaster.engine.normalizer import QuestionNormalizer

    return QuestionNormalizer(rng=random.Random(42))


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def store():
    """Empty in-memory store."""
    from quizmaster.storage.memory_store import InMemoryQuizStore

    return InMemoryQuizStore()


@pytest.fixture
def slow_store():
    """In-memory store that sleeps between reading and writing an aggregate.

    The delay lets concurrent updates interleave inside the critical section.
    """
    from quizmaster.storage.memory_store import InMemoryQuizStore

    class SlowQuizStore(InMemoryQuizStore):
        async def _pause(self) -> None:
            await asyncio.sleep(0.001)

    return SlowQuizStore()


# =============================================================================
# APP FIXTURES
# =============================================================================


@pytest.fixture
def app_state_reset():
    """Clear the app singletons before and after a test."""
    import app_state

    app_state.reset()
    yield app_state
    app_state.reset()
