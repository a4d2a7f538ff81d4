from __future__ import annotations

import json
from pathlib import Path

import pytest

from survey_trends.cli import build_parser, main

QUESTIONS = [
    {"id": 1, "question_text": "만족도", "question_type": "rating", "order_index": 0, "is_active": True},
    {"id": 2, "question_text": "의견", "question_type": "text", "order_index": 1, "is_active": True},
]

RESPONSES = [
    {"question_id": 1, "response_value": "3", "submitted_at": "2024-03-04T10:00:00Z"},
    {"question_id": 1, "response_value": "4", "submitted_at": "2024-03-05T10:00:00Z"},
    {"question_id": 1, "response_value": "4", "submitted_at": "2024-03-11T10:00:00Z"},
    {"question_id": 2, "response_value": "좋아요", "submitted_at": "2024-03-11T10:00:00Z"},
    {"question_id": 1, "response_value": "5", "submitted_at": "broken"},
]


@pytest.fixture(autouse=True)
def log_to_tmp(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "cli.log"))
    monkeypatch.delenv("SURVEY_TIMEZONE", raising=False)
    monkeypatch.delenv("TEXT_RESPONSE_LIMIT", raising=False)


def test_parser_subcommands() -> None:
    p = build_parser()
    args = p.parse_args(["text", "--limit", "5", "--timezone", "UTC"])
    assert args.cmd == "text"
    assert args.limit == 5
    assert args.timezone == "UTC"
    assert p.parse_args(["weekly"]).out is None
    with pytest.raises(SystemExit):
        p.parse_args([])


def test_aggregate_file_writes_report(tmp_path: Path) -> None:
    questions = tmp_path / "questions.json"
    responses = tmp_path / "responses.json"
    out = tmp_path / "out" / "report.json"
    questions.write_text(json.dumps(QUESTIONS, ensure_ascii=False), encoding="utf-8")
    responses.write_text(json.dumps({"data": RESPONSES}, ensure_ascii=False), encoding="utf-8")

    main([
        "aggregate-file",
        "--questions", str(questions),
        "--responses", str(responses),
        "--out", str(out),
    ])

    data = json.loads(out.read_text(encoding="utf-8"))
    assert [w["week"] for w in data["weeks"]] == ["2024년 3월 2주차", "2024년 3월 3주차"]
    assert [w["count"] for w in data["weeks"]] == [2, 1]
    assert data["weeks"][0]["perQuestionAverage"] == {"1": 3.5}
    assert data["weeks"][0]["trends"] == {}
    assert data["weeks"][1]["trends"]["1"] == {
        "change": "0.50",
        "changePercentage": "+14.3%",
        "direction": "up",
    }
    assert [e["text"] for e in data["textResponses"]["2"]] == ["좋아요"]


def test_aggregate_file_prints_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    questions = tmp_path / "questions.json"
    responses = tmp_path / "responses.json"
    questions.write_text(json.dumps(QUESTIONS), encoding="utf-8")
    responses.write_text(json.dumps(RESPONSES), encoding="utf-8")

    main(["aggregate-file", "--questions", str(questions), "--responses", str(responses), "--timezone", "UTC"])

    data = json.loads(capsys.readouterr().out)
    assert len(data["weeks"]) == 2
    assert set(data) == {"ratingQuestions", "textQuestions", "weeks", "textResponses"}


def test_zero_text_limit_is_rejected(tmp_path: Path) -> None:
    questions = tmp_path / "questions.json"
    responses = tmp_path / "responses.json"
    questions.write_text(json.dumps(QUESTIONS), encoding="utf-8")
    responses.write_text(json.dumps(RESPONSES), encoding="utf-8")

    with pytest.raises(ValueError):
        main([
            "aggregate-file",
            "--questions", str(questions),
            "--responses", str(responses),
            "--text-limit", "0",
        ])
