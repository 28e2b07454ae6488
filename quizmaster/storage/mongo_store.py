"""Mongo Store - MongoDB persistence (motor) with atomic aggregate updates."""

from __future__ import annotations

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..exceptions import DuplicateResultError, QuizNotFoundError
from ..models.schemas import Quiz, Result, UserStats
from .base import QuizStore

logger = logging.getLogger(__name__)


def _round2(expr: Any) -> dict[str, Any]:
    """Server-side round half up to 2 decimals ($round rounds half to even)."""
    return {"$divide": [{"$floor": {"$add": [{"$multiply": [expr, 100]}, 0.5]}}, 100]}


def _running_mean(average_field: str, count_field: str, new_value: float) -> dict[str, Any]:
    average = {"$ifNull": [f"${average_field}", 0]}
    count = {"$ifNull": [f"${count_field}", 0]}
    return _round2(
        {"$divide": [{"$add": [{"$multiply": [average, count]}, new_value]}, {"$add": [count, 1]}]}
    )


def quiz_stats_pipeline(percentage: float) -> list[dict[str, Any]]:
    """Update pipeline for one quiz attempt.

    Every expression in the ``$set`` stage reads the pre-update document, so
    the new average uses the old ``attempts`` value.
    """
    return [
        {
            "$set": {
                "average_score": _running_mean("average_score", "attempts", percentage),
                "attempts": {"$add": [{"$ifNull": ["$attempts", 0]}, 1]},
            }
        }
    ]


def user_stats_pipeline(
    user_id: str, score: int, total_questions: int, correct_answers: int, percentage: float
) -> list[dict[str, Any]]:
    """Update pipeline for one user result (works on upserted empty docs)."""

    def inc(field: str, amount: int) -> dict[str, Any]:
        return {"$add": [{"$ifNull": [f"${field}", 0]}, amount]}

    return [
        {
            "$set": {
                "user_id": user_id,
                "average_score": _running_mean("average_score", "quizzes_taken", percentage),
                "quizzes_taken": inc("quizzes_taken", 1),
                "total_score": inc("total_score", score),
                "total_correct": inc("total_correct", correct_answers),
                "total_questions": inc("total_questions", total_questions),
                "highest_score": {"$max": [{"$ifNull": ["$highest_score", 0]}, percentage]},
            }
        }
    ]


class MongoQuizStore(QuizStore):
    """Store backed by MongoDB through motor.

    Aggregate updates are single ``find_one_and_update`` calls with an
    aggregation-pipeline update, so the read-compute-write happens atomically
    on the server and concurrent submissions never lose an increment.

    Collections:
        - quizzes: ``_id`` = quiz id
        - results: ``_id`` = result id (insert-only)
        - user_stats: ``_id`` = user id

    Example:
        >>> store = MongoQuizStore.from_uri("mongodb://localhost:27017", "quizmaster")
        >>> await store.ensure_indexes()
    """

    def __init__(self, database: AsyncIOMotorDatabase, client: AsyncIOMotorClient | None = None):
        self.db = database
        self._client = client
        self.quizzes = database["quizzes"]
        self.results = database["results"]
        self.user_stats = database["user_stats"]

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoQuizStore":
        client = AsyncIOMotorClient(uri)
        return cls(client[db_name], client=client)

    async def ensure_indexes(self) -> None:
        await self.results.create_index([("user_id", 1), ("quiz_id", 1)])
        await self.results.create_index([("created_at", DESCENDING)])
        await self.quizzes.create_index("is_published")

    @staticmethod
    def _to_document(model: Quiz | Result) -> dict[str, Any]:
        doc = model.model_dump(mode="json")
        doc["_id"] = doc.pop("id")
        doc["created_at"] = model.created_at
        return doc

    @staticmethod
    def _from_document(doc: dict[str, Any]) -> dict[str, Any]:
        data = dict(doc)
        data["id"] = data.pop("_id")
        return data

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    async def find_quiz_by_id(self, quiz_id: str) -> Quiz | None:
        doc = await self.quizzes.find_one({"_id": quiz_id})
        if doc is None:
            return None
        return Quiz.model_validate(self._from_document(doc))

    async def save_quiz(self, quiz: Quiz) -> Quiz:
        doc = self._to_document(quiz)
        await self.quizzes.replace_one({"_id": quiz.id}, doc, upsert=True)
        logger.debug(f"Quiz saved: {quiz.id}")
        return quiz

    async def increment_quiz_stats(self, quiz_id: str, percentage: float) -> None:
        updated = await self.quizzes.find_one_and_update(
            {"_id": quiz_id},
            quiz_stats_pipeline(percentage),
            projection={"attempts": 1, "average_score": 1},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise QuizNotFoundError(f"Quiz {quiz_id} not found", {"quiz_id": quiz_id})

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def increment_user_stats(
        self,
        user_id: str,
        score: int,
        total_questions: int,
        correct_answers: int = 0,
        percentage: float = 0.0,
    ) -> None:
        await self.user_stats.find_one_and_update(
            {"_id": user_id},
            user_stats_pipeline(user_id, score, total_questions, correct_answers, percentage),
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def get_user_stats(self, user_id: str) -> UserStats | None:
        doc = await self.user_stats.find_one({"_id": user_id})
        if doc is None:
            return None
        doc.pop("_id", None)
        return UserStats.model_validate({"user_id": user_id, **doc})

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    async def save_result(self, result: Result) -> Result:
        try:
            await self.results.insert_one(self._to_document(result))
        except DuplicateKeyError as e:
            raise DuplicateResultError(
                f"Result {result.id} already exists", {"result_id": result.id}
            ) from e
        return result

    async def find_result_by_id(self, result_id: str) -> Result | None:
        doc = await self.results.find_one({"_id": result_id})
        if doc is None:
            return None
        return Result.model_validate(self._from_document(doc))

    async def list_results_for_user(self, user_id: str, limit: int = 10) -> list[Result]:
        cursor = self.results.find({"user_id": user_id}).sort("created_at", DESCENDING).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [Result.model_validate(self._from_document(doc)) for doc in docs]

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
