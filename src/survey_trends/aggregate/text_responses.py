"""Free-text answers grouped per question, newest first."""
from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from survey_trends.models import Question, QuestionId, RawResponse, TextEntry
from survey_trends.weeks import DEFAULT_TIMEZONE, parse_timestamp

log = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


def group_text_responses(
    responses: Iterable[RawResponse],
    text_questions: Iterable[Question],
    limit: int = DEFAULT_LIMIT,
    *,
    tz: str = DEFAULT_TIMEZONE,
) -> dict[QuestionId, list[TextEntry]]:
    """Collect the `limit` most recent answers of each text question.

    Every question in `text_questions` gets a key, possibly with an empty
    list. Rows with a null value, an unparseable timestamp or an unknown
    question id are skipped.

    Raises:
        ValueError: if `limit` is smaller than 1.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    collected: dict[QuestionId, list[tuple[pd.Timestamp, str]]] = {
        q.id: [] for q in text_questions
    }
    for response in responses:
        if response.question_id not in collected or response.response_value is None:
            continue
        ts = parse_timestamp(response.submitted_at, tz)
        if ts is None:
            continue
        collected[response.question_id].append((ts, response.response_value))

    grouped: dict[QuestionId, list[TextEntry]] = {}
    for qid, rows in collected.items():
        # stable sort: equal timestamps keep encounter order
        newest = sorted(rows, key=lambda row: row[0], reverse=True)[:limit]
        grouped[qid] = [
            TextEntry(text=text, created_at=ts.to_pydatetime()) for ts, text in newest
        ]

    log.debug("Grouped text responses for %d questions", len(grouped))
    return grouped
