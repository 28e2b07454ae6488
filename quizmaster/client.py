"""Quiz API Client - HTTP client used by quiz takers.

Plugs into ``QuizSession`` as its submitter:

    >>> async with QuizApiClient("http://localhost:8000", user_id="u1") as api:
    ...     quiz = await api.fetch_quiz("abc123")
    ...     session = QuizSession(quiz, submitter=api.submit)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .exceptions import QuizNotFoundError, QuizNotPublishedError, SubmissionError
from .models.schemas import PublicQuiz, Submission

logger = logging.getLogger(__name__)


class QuizApiClient:
    """Async client for the quiz HTTP API.

    Every failure of ``submit`` (transport, timeout, non-2xx, bad payload)
    becomes a ``SubmissionError`` so the session returns to ``running`` and
    the user can retry.
    """

    def __init__(
        self,
        base_url: str,
        user_id: str,
        role: str = "user",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = {"X-User-Id": user_id, "X-User-Role": role}
        self._client = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)
        self._owns_client = http_client is None

    async def __aenter__(self) -> "QuizApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_quiz(self, quiz_id: str) -> PublicQuiz:
        """Load the sanitized quiz for a session.

        Raises:
            QuizNotFoundError: 404
            QuizNotPublishedError: 403
            httpx.HTTPStatusError: Any other error status
        """
        response = await self._client.get(f"/api/quizzes/{quiz_id}", headers=self.headers)
        if response.status_code == 404:
            raise QuizNotFoundError("Quiz not found", {"quiz_id": quiz_id})
        if response.status_code == 403:
            raise QuizNotPublishedError("Quiz not available", {"quiz_id": quiz_id})
        response.raise_for_status()

        data = response.json()
        # Takers get the public view; drop answer flags if the caller could see them
        for question in data.get("questions", []):
            for option in question.get("options", []):
                option.pop("is_correct", None)
            question.pop("explanation", None)
        return PublicQuiz.model_validate(data)

    async def submit(self, submission: Submission) -> str:
        """POST the submission.

        Returns:
            Id of the created Result

        Raises:
            SubmissionError: Any failure to get a Result back
        """
        try:
            response = await self._client.post(
                "/api/results",
                json=submission.model_dump(mode="json"),
                headers=self.headers,
            )
            response.raise_for_status()
            return str(response.json()["id"])
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.warning(f"Submission rejected ({e.response.status_code}): {detail}")
            raise SubmissionError(
                f"Submission failed: {detail}",
                {"status_code": e.response.status_code, "quiz_id": submission.quiz_id},
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Submission transport error: {e}")
            raise SubmissionError(
                f"Submission failed: {e}", {"quiz_id": submission.quiz_id}
            ) from e
        except (ValueError, KeyError) as e:
            raise SubmissionError(
                "Submission failed: invalid response payload", {"quiz_id": submission.quiz_id}
            ) from e


def _error_detail(response: httpx.Response) -> str:
    try:
        return str(response.json().get("detail", response.text))
    except (ValueError, AttributeError):
        return response.text
