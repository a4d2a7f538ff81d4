"""Assemble the full results report from the survey store.

Questions are fetched first; the rating and text responses are then fetched
concurrently as two delayed tasks before the pure aggregation runs once.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable
from typing import cast, Any as TypingAny

from dask import delayed, compute  # type: ignore[attr-defined]

from survey_trends.aggregate.pipeline import aggregate
from survey_trends.aggregate.text_responses import DEFAULT_LIMIT, group_text_responses
from survey_trends.ingest.fetch import fetch_active_questions, fetch_responses
from survey_trends.models import Question, RawResponse, SurveyReport
from survey_trends.weeks import DEFAULT_TIMEZONE

log = logging.getLogger(__name__)


def split_questions(questions: Iterable[Question]) -> tuple[list[Question], list[Question]]:
    """Split questions into (rating, text), preserving their order."""
    rating: list[Question] = []
    text: list[Question] = []
    for q in questions:
        (rating if q.is_rating else text).append(q)
    return rating, text


def build_report(
    db: Any,
    *,
    tz: str = DEFAULT_TIMEZONE,
    text_limit: int = DEFAULT_LIMIT,
) -> SurveyReport:
    """Fetch questions and responses from `db` and aggregate them.

    Args:
        db: PyMongo Database holding `questions` and `responses`.
        tz: Timezone used for week bucketing and text ordering.
        text_limit: Max number of text answers kept per text question.

    Returns:
        A `SurveyReport` with weekly summaries and grouped text answers.
    """
    rating_questions, text_questions = split_questions(fetch_active_questions(db))

    tasks = [
        delayed(fetch_responses, pure=False)(db, [q.id for q in rating_questions]),
        delayed(fetch_responses, pure=False)(db, [q.id for q in text_questions]),
    ]
    # `compute` is untyped; cast to Any before calling
    rating_responses, text_responses = cast(TypingAny, compute)(*tasks, scheduler="threads")

    return _assemble(
        rating_questions,
        text_questions,
        rating_responses,
        text_responses,
        tz=tz,
        text_limit=text_limit,
    )


def build_report_from_records(
    questions: Iterable[Question],
    responses: Iterable[RawResponse],
    *,
    tz: str = DEFAULT_TIMEZONE,
    text_limit: int = DEFAULT_LIMIT,
) -> SurveyReport:
    """Build a report from already loaded rows (e.g. a JSON export).

    Inactive questions are dropped and the rest ordered by `order_index`,
    matching what `fetch_active_questions` returns from the store.
    """
    active = sorted((q for q in questions if q.is_active), key=lambda q: q.order_index)
    rating_questions, text_questions = split_questions(active)
    text_ids = {q.id for q in text_questions}
    rows = list(responses)
    return _assemble(
        rating_questions,
        text_questions,
        rows,
        [r for r in rows if r.question_id in text_ids],
        tz=tz,
        text_limit=text_limit,
    )


def _assemble(
    rating_questions: list[Question],
    text_questions: list[Question],
    rating_responses: Iterable[RawResponse],
    text_responses: Iterable[RawResponse],
    *,
    tz: str,
    text_limit: int,
) -> SurveyReport:
    weeks = aggregate(rating_responses, rating_questions, tz=tz)
    grouped_text = group_text_responses(text_responses, text_questions, text_limit, tz=tz)
    log.info(
        "Report built: %d weeks, %d rating questions, %d text questions",
        len(weeks),
        len(rating_questions),
        len(text_questions),
    )
    return SurveyReport(
        rating_questions=rating_questions,
        text_questions=text_questions,
        weeks=weeks,
        text_responses=grouped_text,
    )
