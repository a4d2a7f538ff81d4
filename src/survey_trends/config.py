"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables (MongoDB connection, the survey timezone used for
week bucketing, and the text response cap) and fails fast on invalid values.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import os

from dotenv import load_dotenv

from survey_trends.weeks import DEFAULT_TIMEZONE

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_TEXT_RESPONSE_LIMIT = 50

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Container for survey_trends configuration read from the environment.

    Attributes:
        mongo_uri: MongoDB connection URI.
        mongo_db: Database holding the `questions` and `responses` collections.
        mongo_tls: Whether to connect with TLS using the certifi CA bundle.
        timezone: IANA timezone in which submission timestamps are bucketed.
        text_response_limit: Max number of text answers kept per question.
        log_path: File the CLI writes its log to.
    """
    mongo_uri: str
    mongo_db: str
    mongo_tls: bool
    timezone: str
    text_response_limit: int
    log_path: Path


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `SURVEY_TIMEZONE` is not a known timezone or
            `TEXT_RESPONSE_LIMIT` is not a positive integer.
    """
    mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017").strip()
    mongo_db = os.getenv("MONGO_DB", "survey").strip()
    mongo_tls = os.getenv("MONGO_TLS", "false").strip().lower() in _TRUTHY
    timezone = os.getenv("SURVEY_TIMEZONE", DEFAULT_TIMEZONE).strip()
    raw_limit = os.getenv("TEXT_RESPONSE_LIMIT", str(DEFAULT_TEXT_RESPONSE_LIMIT)).strip()
    log_path = Path(os.getenv("LOG_PATH", "logs/survey_trends.log"))

    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(
            f"SURVEY_TIMEZONE={timezone!r} is not a valid IANA timezone "
            "(example: 'Asia/Seoul')."
        ) from exc

    try:
        text_response_limit = int(raw_limit)
    except ValueError:
        text_response_limit = 0
    if text_response_limit < 1:
        raise RuntimeError(
            f"TEXT_RESPONSE_LIMIT must be a positive integer, got {raw_limit!r}."
        )

    return Settings(
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        mongo_tls=mongo_tls,
        timezone=timezone,
        text_response_limit=text_response_limit,
        log_path=log_path,
    )
