"""Validation utilities for rows read from the survey store.

Each document is validated with the Pydantic input models. Invalid documents
are dropped and counted rather than failing the whole batch.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from survey_trends.models import Question, RawResponse

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate_rows(rows: Iterable[dict[str, Any]], model: type[M]) -> tuple[list[M], int]:
    good: list[M] = []
    bad = 0

    for rec in rows:
        try:
            good.append(model.model_validate(rec))
        except ValidationError as exc:
            bad += 1
            log.debug("Dropping invalid %s row: %s", model.__name__, exc.errors()[:1])

    if bad:
        log.warning("Dropped %d invalid %s rows (kept %d)", bad, model.__name__, len(good))
    return good, bad


def validate_responses(rows: Iterable[dict[str, Any]]) -> tuple[list[RawResponse], int]:
    """Validate response documents.

    Args:
        rows: Documents from the `responses` collection (or a JSON export).

    Returns:
        A tuple of (validated RawResponse list, bad_count).
    """
    return _validate_rows(rows, RawResponse)


def validate_questions(rows: Iterable[dict[str, Any]]) -> tuple[list[Question], int]:
    """Validate question documents.

    Returns:
        A tuple of (validated Question list, bad_count).
    """
    return _validate_rows(rows, Question)
