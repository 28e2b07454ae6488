"""Quiz Router - FastAPI endpoints for quizzes, results and user stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query

import app_state

from .engine.generator import QuizGenerator
from .engine.pipeline import SubmissionPipeline
from .exceptions import (
    IngestionError,
    QuizNotFoundError,
    QuizNotPublishedError,
    TriviaAPIError,
    TriviaTimeoutError,
    TriviaTransportError,
)
from .models.enums import UserRole
from .models.schemas import (
    GenerateQuizRequest,
    PublicQuiz,
    Quiz,
    Result,
    ResultAnswerDetail,
    ResultDetailResponse,
    Submission,
    UserStats,
)
from .storage.base import QuizStore
from .trivia.client import CATEGORY_MAP, CATEGORY_NAMES, OpenTriviaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quiz"])

# =============================================================================
# IDENTITY
# =============================================================================


@dataclass
class Caller:
    """Identity forwarded by the auth layer in ``X-User-Id`` / ``X-User-Role``."""

    user_id: str | None = None
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def owns_or_admin(self, owner_id: str) -> bool:
        return self.is_admin or (self.user_id is not None and self.user_id == owner_id)


def get_optional_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    """Caller identity; anonymous when no user header is present."""
    try:
        role = UserRole((x_user_role or UserRole.USER.value).lower())
    except ValueError:
        role = UserRole.USER
    return Caller(user_id=x_user_id or None, role=role)


def get_caller(caller: Caller = Depends(get_optional_caller)) -> Caller:
    """Authenticated caller (401 otherwise)."""
    if caller.user_id is None:
        raise HTTPException(status_code=401, detail="Not authorized, missing user identity")
    return caller


# =============================================================================
# QUIZ ENDPOINTS
# =============================================================================


@router.get("/quizzes/trivia-categories")
async def get_trivia_categories(
    trivia: OpenTriviaClient = Depends(app_state.get_trivia_client),
    _caller: Caller = Depends(get_caller),
) -> dict[str, Any]:
    """Upstream trivia categories plus the local category mapping."""
    categories = await trivia.get_categories()
    return {
        "categories": categories,
        "mapped_categories": {
            category.value: {"id": CATEGORY_MAP[category], "name": CATEGORY_NAMES[category]}
            for category in CATEGORY_MAP
        },
    }


@router.post("/quizzes/generate", response_model=Quiz, status_code=201)
async def generate_quiz(
    request: GenerateQuizRequest,
    generator: QuizGenerator = Depends(app_state.get_generator),
    caller: Caller = Depends(get_caller),
):
    """Generate a published quiz from Open Trivia DB.

    - Upstream failures (timeout, API error code, transport) -> 502
    - No usable question survived normalization -> 400
    """
    try:
        return await generator.generate(request, created_by=caller.user_id)
    except (TriviaAPIError, TriviaTimeoutError, TriviaTransportError) as e:
        logger.error(f"Quiz generation failed upstream: {e}")
        raise HTTPException(status_code=502, detail=e.message) from e
    except IngestionError as e:
        logger.warning(f"Quiz generation rejected: {e}")
        raise HTTPException(status_code=400, detail=e.message) from e


@router.get("/quizzes/{quiz_id}", response_model=None)
async def get_quiz(
    quiz_id: str,
    store: QuizStore = Depends(app_state.get_store),
    caller: Caller = Depends(get_optional_caller),
) -> Quiz | PublicQuiz:
    """Full quiz for admins and the creator; sanitized view for everyone else."""
    quiz = await store.find_quiz_by_id(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")

    can_see_answers = caller.owns_or_admin(quiz.created_by)
    if not quiz.is_published and not can_see_answers:
        raise HTTPException(status_code=403, detail="Quiz is not published")

    return quiz.view_for(can_see_answers)


# =============================================================================
# RESULT ENDPOINTS
# =============================================================================


@router.post("/results", response_model=Result, status_code=201)
async def submit_result(
    submission: Submission,
    pipeline: SubmissionPipeline = Depends(app_state.get_pipeline),
    caller: Caller = Depends(get_caller),
):
    """Score a submission and update quiz/user statistics."""
    try:
        return await pipeline.submit(submission, user_id=caller.user_id)
    except QuizNotFoundError as e:
        raise HTTPException(status_code=404, detail="Quiz not found") from e
    except QuizNotPublishedError as e:
        raise HTTPException(status_code=403, detail="Quiz is not published") from e


def enrich_answers(result: Result, quiz: Quiz | None) -> list[ResultAnswerDetail]:
    """Attach question text, chosen/correct option text and explanation."""
    details = []
    for answer in result.answers:
        question = quiz.index.question(answer.question_id) if quiz is not None else None
        if question is None:
            details.append(ResultAnswerDetail(**answer.model_dump()))
            continue

        selected = quiz.index.option(answer.question_id, answer.selected_option_id)
        details.append(
            ResultAnswerDetail(
                **answer.model_dump(),
                question_text=question.text,
                selected_answer=selected.text if selected else "No answer selected",
                correct_answer=question.correct_option.text,
                explanation=question.explanation,
            )
        )
    return details


@router.get("/results/{result_id}", response_model=ResultDetailResponse)
async def get_result(
    result_id: str,
    store: QuizStore = Depends(app_state.get_store),
    caller: Caller = Depends(get_caller),
):
    """Result with per-answer details (owner or admin)."""
    result = await store.find_result_by_id(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Result not found")
    if not caller.owns_or_admin(result.user_id):
        raise HTTPException(status_code=403, detail="Access denied")

    quiz = await store.find_quiz_by_id(result.quiz_id)
    return ResultDetailResponse(result=result, answers=enrich_answers(result, quiz))


# =============================================================================
# USER ENDPOINTS
# =============================================================================


@router.get("/users/{user_id}/stats", response_model=UserStats)
async def get_user_stats(
    user_id: str,
    store: QuizStore = Depends(app_state.get_store),
    caller: Caller = Depends(get_caller),
):
    """Aggregate statistics (owner or admin); zeros before the first result."""
    if not caller.owns_or_admin(user_id):
        raise HTTPException(status_code=403, detail="Access denied")
    stats = await store.get_user_stats(user_id)
    return stats or UserStats(user_id=user_id)


@router.get("/users/{user_id}/results", response_model=list[Result])
async def list_user_results(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    store: QuizStore = Depends(app_state.get_store),
    caller: Caller = Depends(get_caller),
):
    """Most recent results of a user (owner or admin)."""
    if not caller.owns_or_admin(user_id):
        raise HTTPException(status_code=403, detail="Access denied")
    return await store.list_results_for_user(user_id, limit=limit)
