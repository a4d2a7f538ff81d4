from __future__ import annotations

from typing import Any

import pytest

from survey_trends.models import Question, QuestionType, RawResponse


class FakeCursor:
    """Minimal stand-in for a PyMongo cursor over in-memory documents."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        return FakeCursor(sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0))

    def limit(self, n: int) -> "FakeCursor":
        return FakeCursor(self._docs[:n])

    def __iter__(self):
        return iter([dict(d) for d in self._docs])


class FakeCollection:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self.docs = docs
        self.queries: list[dict[str, Any]] = []

    def find(self, query: dict[str, Any], projection: dict[str, Any] | None = None) -> FakeCursor:
        self.queries.append(query)
        return FakeCursor([d for d in self.docs if _matches(d, query)])


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    for field, cond in query.items():
        if isinstance(cond, dict) and "$in" in cond:
            if doc.get(field) not in cond["$in"]:
                return False
        elif doc.get(field) != cond:
            return False
    return True


@pytest.fixture
def make_db():
    def _make(questions: list[dict[str, Any]], responses: list[dict[str, Any]]) -> dict[str, FakeCollection]:
        return {
            "questions": FakeCollection(questions),
            "responses": FakeCollection(responses),
        }

    return _make


def rating(qid: int | str, order: int = 0) -> Question:
    return Question(id=qid, question_text=f"Q{qid}", question_type=QuestionType.RATING, order_index=order)


def text(qid: int | str, order: int = 0) -> Question:
    return Question(id=qid, question_text=f"T{qid}", question_type=QuestionType.TEXT, order_index=order)


def resp(qid: int | str, value: str | None, at: str | None, session: str | None = None) -> RawResponse:
    return RawResponse(question_id=qid, response_value=value, submitted_at=at, session_id=session)
