"""Fetch active questions and raw responses from MongoDB.

Store errors (`pymongo.errors.PyMongoError`) are not caught here; they reach
the caller unchanged.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from pymongo import ASCENDING, DESCENDING

from survey_trends.clean.validate import validate_questions, validate_responses
from survey_trends.models import Question, QuestionId, RawResponse

log = logging.getLogger(__name__)

QUESTIONS_COLLECTION = "questions"
RESPONSES_COLLECTION = "responses"


def fetch_active_questions(db: Any) -> list[Question]:
    """Return active questions ordered by `order_index` ascending.

    Args:
        db: PyMongo Database (anything indexable by collection name).
    """
    cursor = (
        db[QUESTIONS_COLLECTION]
        .find({"is_active": True}, {"_id": False})
        .sort("order_index", ASCENDING)
    )
    questions, _ = validate_questions(cursor)
    log.info("Fetched %d active questions", len(questions))
    return questions


def fetch_responses(
    db: Any,
    question_ids: Sequence[QuestionId],
    limit: int | None = None,
) -> list[RawResponse]:
    """Return responses to `question_ids`, newest `submitted_at` first.

    Args:
        db: PyMongo Database.
        question_ids: Question ids to include. An empty list returns `[]`
            without querying.
        limit: Optional cap on the number of rows read.
    """
    if not question_ids:
        return []

    cursor = (
        db[RESPONSES_COLLECTION]
        .find({"question_id": {"$in": list(question_ids)}}, {"_id": False})
        .sort("submitted_at", DESCENDING)
    )
    if limit is not None:
        cursor = cursor.limit(limit)

    responses, _ = validate_responses(cursor)
    log.info("Fetched %d responses for %d questions", len(responses), len(question_ids))
    return responses
