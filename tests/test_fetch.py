from __future__ import annotations

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from survey_trends.ingest.fetch import fetch_active_questions, fetch_responses

QUESTIONS = [
    {"id": 2, "question_text": "의견", "question_type": "text", "order_index": 2, "is_active": True},
    {"id": 1, "question_text": "만족도", "question_type": "rating", "order_index": 1, "is_active": True},
    {"id": 3, "question_text": "old", "question_type": "rating", "order_index": 0, "is_active": False},
]

RESPONSES = [
    {"question_id": 1, "response_value": "3", "submitted_at": "2024-03-04T10:00:00Z"},
    {"question_id": 1, "response_value": "5", "submitted_at": "2024-03-11T10:00:00Z"},
    {"question_id": 2, "response_value": "좋아요", "submitted_at": "2024-03-05T10:00:00Z"},
    {"question_id": 1, "response_value": "4", "submitted_at": "2024-03-06T10:00:00Z"},
]


def test_fetch_active_questions_filters_and_orders(make_db) -> None:
    db = make_db(QUESTIONS, RESPONSES)
    questions = fetch_active_questions(db)
    assert [q.id for q in questions] == [1, 2]
    assert db["questions"].queries == [{"is_active": True}]


def test_fetch_responses_newest_first(make_db) -> None:
    db = make_db(QUESTIONS, RESPONSES)
    rows = fetch_responses(db, [1])
    assert [r.response_value for r in rows] == ["5", "4", "3"]


def test_fetch_responses_limit(make_db) -> None:
    db = make_db(QUESTIONS, RESPONSES)
    rows = fetch_responses(db, [1, 2], limit=2)
    assert [r.response_value for r in rows] == ["5", "4"]


def test_fetch_responses_without_ids_skips_query(make_db) -> None:
    db = make_db(QUESTIONS, RESPONSES)
    assert fetch_responses(db, []) == []
    assert db["responses"].queries == []


class _DownCollection:
    def find(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")


def test_store_failures_propagate() -> None:
    with pytest.raises(ServerSelectionTimeoutError):
        fetch_active_questions({"questions": _DownCollection()})
    with pytest.raises(ServerSelectionTimeoutError):
        fetch_responses({"responses": _DownCollection()}, [1])
