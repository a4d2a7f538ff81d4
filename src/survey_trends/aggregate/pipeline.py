"""Weekly aggregation pipeline: the entry point used by the results dashboard.

Stages (each a pure function, independently testable):
filter rating questions → group into week buckets → average per bucket →
drop empty buckets → sort by week start → derive trends.
"""
from __future__ import annotations

import logging
from typing import Iterable

from survey_trends.aggregate.averages import summarize_bucket
from survey_trends.aggregate.grouping import SubmissionKey, by_submitted_at, group_responses
from survey_trends.aggregate.trends import add_trends
from survey_trends.models import Question, RawResponse, WeekSummary
from survey_trends.weeks import DEFAULT_TIMEZONE

log = logging.getLogger(__name__)


def aggregate(
    responses: Iterable[RawResponse],
    rating_questions: Iterable[Question],
    *,
    tz: str = DEFAULT_TIMEZONE,
    submission_key: SubmissionKey = by_submitted_at,
) -> list[WeekSummary]:
    """Aggregate raw responses into chronologically ordered weekly summaries.

    Args:
        responses: Raw response rows; not mutated.
        rating_questions: Questions to average. Non-rating questions in this
            sequence are ignored.
        tz: Timezone in which submission timestamps are bucketed.
        submission_key: Strategy identifying one respondent's submission.

    Returns:
        One `WeekSummary` per week, ascending by date. Empty when there are
        no responses or no rating questions.
    """
    question_ids = [q.id for q in rating_questions if q.is_rating]
    if not question_ids:
        return []

    buckets = group_responses(
        responses, question_ids, tz=tz, submission_key=submission_key
    )
    summaries = [
        summarize_bucket(bucket, question_ids)
        for bucket in buckets.values()
        if bucket.count > 0
    ]
    # sorted() is stable: equal dates keep encounter order
    summaries = sorted(summaries, key=lambda s: s.date)

    log.info(
        "Aggregated %d weeks across %d rating questions", len(summaries), len(question_ids)
    )
    return add_trends(summaries, question_ids)
