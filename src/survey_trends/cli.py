"""Command-line interface for the survey results report.

Provides subcommands: `weekly`, `text`, `report`, and `aggregate-file`. Each
command is implemented as a `cmd_*` function that accepts an argparse
namespace and writes JSON to stdout or to `--out`.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from survey_trends.aggregate.pipeline import aggregate
from survey_trends.aggregate.text_responses import group_text_responses
from survey_trends.clean.validate import validate_questions, validate_responses
from survey_trends.config import Settings, get_settings
from survey_trends.db import get_client, get_db
from survey_trends.ingest.fetch import fetch_active_questions, fetch_responses
from survey_trends.logging_config import configure_logging
from survey_trends.report import build_report, build_report_from_records, split_questions

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _db_from(settings: Settings) -> Any:
    client = get_client(settings.mongo_uri, tls=settings.mongo_tls)
    return get_db(client, settings.mongo_db)


def _dump(obj: Any) -> Any:
    """Convert pydantic models (and containers of them) to JSON-ready data."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, dict):
        return {str(k): _dump(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_dump(v) for v in obj]
    return obj


def _emit(payload: Any, out: Path | None) -> None:
    """Write `payload` as pretty JSON to `out`, or to stdout when omitted."""
    text = json.dumps(_dump(payload), ensure_ascii=False, indent=2)
    if out is None:
        print(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    log.info("Wrote %s", out)


def _read_json_rows(path: Path) -> list[dict[str, Any]]:
    """Read a JSON export: either a list of rows or an object with a `data` list."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("data", [])
    if not isinstance(data, list):
        raise RuntimeError(f"{path} must contain a JSON list of rows.")
    return data


def _timezone(args: argparse.Namespace, settings: Settings) -> str:
    return args.timezone or settings.timezone


def _text_limit(args: argparse.Namespace, settings: Settings) -> int:
    return settings.text_response_limit if args.text_limit is None else args.text_limit


# --------------------------------------------------
# Commands
# --------------------------------------------------
def cmd_weekly(args: argparse.Namespace) -> None:
    """Fetch rating responses and print the weekly summaries."""
    s = get_settings()
    db = _db_from(s)

    rating_questions, _ = split_questions(fetch_active_questions(db))
    responses = fetch_responses(db, [q.id for q in rating_questions])
    weeks = aggregate(responses, rating_questions, tz=_timezone(args, s))
    _emit(weeks, args.out)


def cmd_text(args: argparse.Namespace) -> None:
    """Fetch text responses and print them grouped per question."""
    s = get_settings()
    db = _db_from(s)

    _, text_questions = split_questions(fetch_active_questions(db))
    responses = fetch_responses(db, [q.id for q in text_questions])
    limit = s.text_response_limit if args.limit is None else args.limit
    grouped = group_text_responses(responses, text_questions, limit, tz=_timezone(args, s))
    _emit(grouped, args.out)


def cmd_report(args: argparse.Namespace) -> None:
    """Fetch everything and print the full report."""
    s = get_settings()
    report = build_report(
        _db_from(s),
        tz=_timezone(args, s),
        text_limit=_text_limit(args, s),
    )
    _emit(report, args.out)


def cmd_aggregate_file(args: argparse.Namespace) -> None:
    """Build the full report from JSON exports, without a database."""
    s = get_settings()
    questions, _ = validate_questions(_read_json_rows(args.questions))
    responses, _ = validate_responses(_read_json_rows(args.responses))
    report = build_report_from_records(
        questions,
        responses,
        tz=_timezone(args, s),
        text_limit=_text_limit(args, s),
    )
    _emit(report, args.out)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Every subcommand accepts `--timezone` (overrides `SURVEY_TIMEZONE`) and
    `--out` (write JSON to a file instead of stdout).

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="survey-trends")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")
    sub = p.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--timezone", default=None)
    common.add_argument("--out", type=Path, default=None)

    sub.add_parser("weekly", parents=[common])

    p_text = sub.add_parser("text", parents=[common])
    p_text.add_argument("--limit", type=int, default=None)

    p_report = sub.add_parser("report", parents=[common])
    p_report.add_argument("--text-limit", type=int, default=None)

    p_file = sub.add_parser("aggregate-file", parents=[common])
    p_file.add_argument("--responses", type=Path, required=True)
    p_file.add_argument("--questions", type=Path, required=True)
    p_file.add_argument("--text-limit", type=int, default=None)

    return p


COMMANDS = {
    "weekly": cmd_weekly,
    "text": cmd_text,
    "report": cmd_report,
    "aggregate-file": cmd_aggregate_file,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO
    configure_logging(get_settings().log_path, level=level)

    command = COMMANDS.get(args.cmd)
    if command is None:
        raise SystemExit(2)
    command(args)


if __name__ == "__main__":
    main()
