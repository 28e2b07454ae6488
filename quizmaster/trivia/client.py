"""Open Trivia Client - Fetches raw questions from Open Trivia DB."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import DEFAULT_TRIVIA_API_URL, DEFAULT_TRIVIA_CATEGORIES_URL
from ..exceptions import TriviaAPIError, TriviaTimeoutError, TriviaTransportError
from ..models.enums import QuestionDifficulty, QuizCategory, QuizDifficulty, TriviaResponseCode

logger = logging.getLogger(__name__)

USER_AGENT = "Quiz-Master-App/1.0"

# Local category -> Open Trivia DB category id
CATEGORY_MAP: dict[QuizCategory, int] = {
    QuizCategory.TECHNOLOGY: 18,  # Science: Computers
    QuizCategory.SCIENCE: 17,  # Science & Nature
    QuizCategory.MATHEMATICS: 19,  # Science: Mathematics
    QuizCategory.HISTORY: 23,
    QuizCategory.LITERATURE: 10,  # Entertainment: Books
    QuizCategory.SPORTS: 21,
    QuizCategory.GENERAL: 9,  # General Knowledge
    QuizCategory.PROGRAMMING: 18,  # Science: Computers (closest match)
}

CATEGORY_NAMES: dict[QuizCategory, str] = {
    QuizCategory.TECHNOLOGY: "Science: Computers",
    QuizCategory.SCIENCE: "Science & Nature",
    QuizCategory.MATHEMATICS: "Science: Mathematics",
    QuizCategory.HISTORY: "History",
    QuizCategory.LITERATURE: "Entertainment: Books",
    QuizCategory.SPORTS: "Sports",
    QuizCategory.GENERAL: "General Knowledge",
    QuizCategory.PROGRAMMING: "Science: Computers",
}


class OpenTriviaClient:
    """Async client for the Open Trivia DB API.

    Question fetches use a bounded timeout; a timeout or a non-zero
    ``response_code`` aborts the whole request with an ``IngestionError``
    subclass carrying a specific message.

    Example:
        >>> async with OpenTriviaClient() as trivia:
        ...     records = await trivia.fetch_questions(amount=5, category="general")
    """

    CATEGORIES_TIMEOUT = 5.0

    def __init__(
        self,
        base_url: str = DEFAULT_TRIVIA_API_URL,
        categories_url: str = DEFAULT_TRIVIA_CATEGORIES_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Create the client.

        Args:
            base_url: Question endpoint
            categories_url: Category list endpoint
            timeout: Timeout (seconds) for question fetches
            http_client: Pre-built client (tests inject a MockTransport here)
        """
        self.base_url = base_url
        self.categories_url = categories_url
        self.timeout = timeout
        self._client = http_client or httpx.AsyncClient(headers={"User-Agent": USER_AGENT})
        self._owns_client = http_client is None

    async def __aenter__(self) -> "OpenTriviaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def build_params(
        amount: int = 15,
        category: QuizCategory | str | None = None,
        difficulty: QuizDifficulty | QuestionDifficulty | str | None = None,
        question_type: str = "multiple",
    ) -> dict[str, Any]:
        """Query parameters; unmapped category/difficulty values are left out."""
        params: dict[str, Any] = {"amount": amount, "type": question_type}

        if category:
            try:
                params["category"] = CATEGORY_MAP[QuizCategory(category)]
            except ValueError:
                logger.debug(f"Category {category!r} has no trivia mapping, ignoring")

        if difficulty:
            try:
                params["difficulty"] = QuestionDifficulty(difficulty).value
            except ValueError:
                pass  # "mixed" and unknown values fetch every difficulty

        return params

    async def fetch_questions(
        self,
        amount: int = 15,
        category: QuizCategory | str | None = None,
        difficulty: QuizDifficulty | QuestionDifficulty | str | None = None,
        question_type: str = "multiple",
    ) -> list[dict[str, Any]]:
        """Fetch raw question records.

        Args:
            amount: Number of questions
            category: Local category name (mapped to the upstream id)
            difficulty: easy/medium/hard (anything else fetches all)
            question_type: Upstream question type

        Returns:
            Raw records, to be handed to ``QuestionNormalizer``

        Raises:
            TriviaTimeoutError: Request exceeded the timeout
            TriviaTransportError: Network/HTTP failure or unreadable payload
            TriviaAPIError: Non-zero ``response_code``
        """
        params = self.build_params(amount, category, difficulty, question_type)
        logger.info(f"Fetching trivia questions: {params}")

        try:
            response = await self._client.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Trivia request timed out after {self.timeout}s")
            raise TriviaTimeoutError(
                f"Failed to fetch questions: request timed out after {self.timeout}s",
                {"timeout": self.timeout},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Trivia request failed: {e}")
            raise TriviaTransportError(f"Failed to fetch questions: {e}") from e
        except ValueError as e:
            raise TriviaTransportError("Failed to fetch questions: invalid JSON payload") from e

        if not isinstance(payload, dict):
            raise TriviaTransportError("Failed to fetch questions: unexpected payload shape")

        raw_code = payload.get("response_code")
        if not isinstance(raw_code, int):
            raise TriviaTransportError("Failed to fetch questions: missing response_code")

        code = TriviaResponseCode.from_code(raw_code)
        if code is not TriviaResponseCode.SUCCESS:
            message = f"Open Trivia DB API error: {code.describe(raw_code)}"
            logger.error(message)
            raise TriviaAPIError(raw_code, message, {"response_code_name": code.name})

        results = payload.get("results") or []
        logger.info(f"Fetched {len(results)} trivia questions")
        return list(results)

    async def get_categories(self) -> list[dict[str, Any]]:
        """Upstream category list; empty when the call fails."""
        try:
            response = await self._client.get(
                self.categories_url, timeout=self.CATEGORIES_TIMEOUT
            )
            response.raise_for_status()
            return list(response.json().get("trivia_categories", []))
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Error fetching trivia categories: {e}")
            return []
