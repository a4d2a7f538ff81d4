"""Group raw response rows into week buckets and submission slots.

A submission slot collects the answers presumed to come from one respondent's
single submission. The slot key is a pluggable strategy: the default uses the
raw `submitted_at` value (all answers of one form submission share it), which
merges two respondents who submit in the same instant.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Callable, Hashable, Iterable, Mapping

from survey_trends.models import QuestionId, RawResponse
from survey_trends.weeks import DEFAULT_TIMEZONE, format_week_label, parse_timestamp, week_start

log = logging.getLogger(__name__)

SubmissionKey = Callable[[RawResponse], Hashable]


def by_submitted_at(response: RawResponse) -> Hashable:
    """Slot key: the raw `submitted_at` value, not the parsed instant."""
    return response.submitted_at


def by_session_id(response: RawResponse) -> Hashable:
    """Slot key: `session_id` when the client sent one, else `submitted_at`."""
    if response.session_id:
        return ("session", response.session_id)
    return ("submitted_at", response.submitted_at)


@dataclass(frozen=True)
class WeekBucket:
    """Submissions of one week, keyed by slot then by question id."""
    label: str
    week_start: date
    submissions: Mapping[Hashable, Mapping[QuestionId, str | None]]

    @property
    def count(self) -> int:
        return len(self.submissions)


def group_responses(
    responses: Iterable[RawResponse],
    rating_question_ids: Iterable[QuestionId],
    *,
    tz: str = DEFAULT_TIMEZONE,
    submission_key: SubmissionKey = by_submitted_at,
) -> dict[str, WeekBucket]:
    """Partition rating responses into week buckets.

    Args:
        responses: Raw response rows in any order.
        rating_question_ids: Ids of the rating questions; rows for any other
            question are ignored.
        tz: Timezone in which timestamps are bucketed.
        submission_key: Strategy mapping a row to its submission slot.

    Returns:
        Insertion-ordered mapping of week label to `WeekBucket`. Buckets and
        slots appear in the order they were first encountered.
    """
    wanted = set(rating_question_ids)
    starts: dict[str, date] = {}
    slots: dict[str, dict[Hashable, dict[QuestionId, str | None]]] = {}
    skipped = 0

    for response in responses:
        if response.question_id not in wanted:
            continue
        ts = parse_timestamp(response.submitted_at, tz)
        if ts is None:
            skipped += 1
            continue

        label = format_week_label(ts)
        if label not in slots:
            starts[label] = week_start(ts)
            slots[label] = {}
        slot = slots[label].setdefault(submission_key(response), {})
        slot[response.question_id] = response.response_value

    if skipped:
        log.debug("Skipped %d responses with unparseable submitted_at", skipped)

    return {
        label: WeekBucket(
            label=label,
            week_start=starts[label],
            submissions=MappingProxyType(
                {key: MappingProxyType(answers) for key, answers in week_slots.items()}
            ),
        )
        for label, week_slots in slots.items()
    }
