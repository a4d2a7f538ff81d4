"""Weekly aggregation of survey responses.

This package turns raw response rows into per-week summaries (average rating
per question, respondent count, trend against the previous week) and groups
free-text answers per question.
"""

from survey_trends.aggregate.pipeline import aggregate
from survey_trends.aggregate.text_responses import group_text_responses

__all__ = ["aggregate", "group_text_responses"]
