from __future__ import annotations

from conftest import rating, resp, text
from survey_trends.models import Question
from survey_trends.report import build_report, build_report_from_records, split_questions

QUESTIONS = [
    {"id": 1, "question_text": "만족도", "question_type": "rating", "order_index": 0, "is_active": True},
    {"id": 2, "question_text": "의견", "question_type": "text", "order_index": 1, "is_active": True},
]

RESPONSES = [
    {"question_id": 1, "response_value": "3", "submitted_at": "2024-03-04T10:00:00Z"},
    {"question_id": 2, "response_value": "좋아요", "submitted_at": "2024-03-04T10:00:00Z"},
    {"question_id": 1, "response_value": "4", "submitted_at": "2024-03-11T10:00:00Z"},
    {"question_id": 2, "response_value": "더 좋아요", "submitted_at": "2024-03-11T10:00:00Z"},
]


def test_split_questions_preserves_order() -> None:
    rated, texts = split_questions([rating(1), text(2), rating(3)])
    assert [q.id for q in rated] == [1, 3]
    assert [q.id for q in texts] == [2]


def test_build_report_from_store(make_db) -> None:
    report = build_report(make_db(QUESTIONS, RESPONSES))
    assert [q.id for q in report.rating_questions] == [1]
    assert [q.id for q in report.text_questions] == [2]
    assert [w.week for w in report.weeks] == ["2024년 3월 2주차", "2024년 3월 3주차"]
    # text answers share timestamps with ratings but never count as submissions
    assert [w.count for w in report.weeks] == [1, 1]
    assert report.latest_week is not None
    assert report.latest_week.trends[1].change == "1.00"
    assert [e.text for e in report.text_responses[2]] == ["더 좋아요", "좋아요"]


def test_build_report_text_limit(make_db) -> None:
    report = build_report(make_db(QUESTIONS, RESPONSES), text_limit=1)
    assert [e.text for e in report.text_responses[2]] == ["더 좋아요"]


def test_build_report_from_records_drops_inactive_questions() -> None:
    questions = [
        Question.model_validate(q)
        for q in QUESTIONS + [{"id": 3, "question_type": "rating", "order_index": 2, "is_active": False}]
    ]
    responses = [resp(r["question_id"], r["response_value"], r["submitted_at"]) for r in RESPONSES]
    responses.append(resp(3, "1", "2024-03-04T12:00:00Z"))
    report = build_report_from_records(questions, responses)
    assert [q.id for q in report.rating_questions] == [1]
    assert [w.count for w in report.weeks] == [1, 1]
    assert set(report.weeks[0].per_question_average) == {1}
    assert [e.text for e in report.text_responses[2]] == ["더 좋아요", "좋아요"]
