"""Per-question weekly averages."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

import numpy as np
import pandas as pd

from survey_trends.aggregate.grouping import WeekBucket
from survey_trends.models import QuestionId, WeekSummary

LEADING_NUMBER = r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"


def to_fixed(value: float, digits: int) -> str:
    """Format `value` with `digits` decimals, rounding half away from zero.

    Rounds the exact binary value of the float, so ``to_fixed(4.25, 1)`` is
    ``"4.3"`` while ``to_fixed(1.005, 2)`` is ``"1.00"``.
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def average_answers(raw_values: Iterable[str | None], digits: int = 1) -> float | None:
    """Mean of the numeric answers in `raw_values`, rounded to `digits` decimals.

    Like a form field parse, the leading number of each answer is used
    (``"4점"`` counts as 4). Answers without one are dropped. Returns None when
    no numeric value remains.
    """
    leading = pd.Series(list(raw_values), dtype=object).str.extract(
        LEADING_NUMBER, expand=False
    )
    numbers = pd.to_numeric(leading, errors="coerce").astype(float)
    numbers = numbers[np.isfinite(numbers)]
    if numbers.empty:
        return None
    mean = float(numbers.mean())
    if math.isnan(mean):
        return None
    return float(to_fixed(mean, digits))


def summarize_bucket(
    bucket: WeekBucket,
    rating_question_ids: Iterable[QuestionId],
) -> WeekSummary:
    """Build the trend-less `WeekSummary` of one bucket.

    `count` is the number of submission slots in the bucket, whether or not a
    slot answered a given question.
    """
    slots = list(bucket.submissions.values())
    averages = {
        qid: average_answers(slot.get(qid) for slot in slots)
        for qid in rating_question_ids
    }
    return WeekSummary(
        week=bucket.label,
        date=bucket.week_start,
        count=bucket.count,
        per_question_average=averages,
    )
