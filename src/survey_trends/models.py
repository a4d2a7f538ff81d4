"""Pydantic models for survey inputs and the weekly summary output.

Input models (`RawResponse`, `Question`) validate documents read from the
store. Output models (`WeekSummary`, `TrendEntry`, `TextEntry`,
`SurveyReport`) define the stable shape consumed by the results dashboard;
they serialize with camelCase aliases when dumped with ``by_alias=True``.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

QuestionId = Union[int, str]
Direction = Literal["up", "down", "stable"]


class QuestionType(str, Enum):
    RATING = "rating"
    TEXT = "text"


class RawResponse(BaseModel):
    """One answer row as stored: a single question answered at `submitted_at`.

    `submitted_at` is kept exactly as received; it is parsed during grouping
    so that unparseable timestamps are skipped rather than rejected here.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")
    question_id: QuestionId
    response_value: str | None = None
    submitted_at: str | dt.datetime | None = None
    session_id: str | None = None

    @field_validator("response_value", mode="before")
    @classmethod
    def coerce_number_to_str(cls, value):
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Question(BaseModel):
    """Survey question definition. Only `id` and `question_type` drive aggregation."""
    model_config = ConfigDict(frozen=True, extra="ignore")
    id: QuestionId
    question_text: str = ""
    question_type: QuestionType
    order_index: int = 0
    is_active: bool = True

    @property
    def is_rating(self) -> bool:
        return self.question_type is QuestionType.RATING


class TrendEntry(BaseModel):
    """Week-over-week change of one question's average."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    change: str
    change_percentage: str = Field(..., serialization_alias="changePercentage")
    direction: Direction


class WeekSummary(BaseModel):
    """Aggregated result for one month-relative week.

    Attributes:
        week: Week label, e.g. ``"2024년 3월 2주차"``.
        date: First day of the week (clipped to the month).
        count: Number of distinct submissions in the week.
        per_question_average: Mean rating per question, None when nobody
            gave a numeric answer.
        trends: Change against the previous week; empty for the first week.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")
    week: str
    date: dt.date
    count: int = Field(..., ge=0)
    per_question_average: dict[QuestionId, float | None] = Field(
        default_factory=dict, serialization_alias="perQuestionAverage"
    )
    trends: dict[QuestionId, TrendEntry] = Field(default_factory=dict)


class TextEntry(BaseModel):
    """A free-text answer shown in the opinions section."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    text: str
    created_at: dt.datetime = Field(..., serialization_alias="createdAt")


class SurveyReport(BaseModel):
    """Everything the results dashboard renders in one object."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    rating_questions: list[Question] = Field(
        default_factory=list, serialization_alias="ratingQuestions"
    )
    text_questions: list[Question] = Field(
        default_factory=list, serialization_alias="textQuestions"
    )
    weeks: list[WeekSummary] = Field(default_factory=list)
    text_responses: dict[QuestionId, list[TextEntry]] = Field(
        default_factory=dict, serialization_alias="textResponses"
    )

    @property
    def latest_week(self) -> WeekSummary | None:
        return self.weeks[-1] if self.weeks else None
