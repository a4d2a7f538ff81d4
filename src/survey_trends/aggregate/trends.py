"""Week-over-week trend indicators.

Each week after the first is compared with the week directly before it in the
sorted sequence. Changes within ±0.1 are classified as ``stable`` so that
rounding noise on 1-5 ratings is not flagged as a trend.
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence

from survey_trends.aggregate.averages import to_fixed
from survey_trends.models import Direction, QuestionId, TrendEntry, WeekSummary

DEAD_ZONE = 0.1


def classify_direction(change: float) -> Direction:
    """Return ``up``/``down`` outside the dead zone, ``stable`` inside it (inclusive)."""
    if change > DEAD_ZONE:
        return "up"
    if change < -DEAD_ZONE:
        return "down"
    return "stable"


def format_change_percentage(change: float, previous: float) -> str:
    """Format the relative change as ``"+16.7%"``; ``"0.0%"`` when `previous` is 0."""
    if previous == 0:
        return "0.0%"
    pct = to_fixed(change / previous * 100, 1)
    sign = "+" if change > 0 else ""
    return f"{sign}{pct}%"


def _missing(value: float | None) -> bool:
    return value is None or math.isnan(value)


def compute_trend(current: float | None, previous: float | None) -> TrendEntry | None:
    """Compare two averages; None when either side is missing."""
    if _missing(current) or _missing(previous):
        return None
    change = current - previous
    return TrendEntry(
        change=to_fixed(change, 2),
        change_percentage=format_change_percentage(change, previous),
        direction=classify_direction(change),
    )


def add_trends(
    summaries: Sequence[WeekSummary],
    rating_question_ids: Iterable[QuestionId],
) -> list[WeekSummary]:
    """Return copies of `summaries` with `trends` filled in.

    `summaries` must already be in chronological order. The first week gets
    an empty mapping; questions missing on either side are left out.
    """
    question_ids = list(rating_question_ids)
    out: list[WeekSummary] = []
    for index, summary in enumerate(summaries):
        trends: dict[QuestionId, TrendEntry] = {}
        if index > 0:
            previous = summaries[index - 1]
            for qid in question_ids:
                entry = compute_trend(
                    summary.per_question_average.get(qid),
                    previous.per_question_average.get(qid),
                )
                if entry is not None:
                    trends[qid] = entry
        out.append(summary.model_copy(update={"trends": trends}))
    return out
