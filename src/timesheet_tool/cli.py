"""CLI para resumir horas trabajadas a partir de notas diarias en texto."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from timesheet_tool.config import (
    DEFAULT_SUFFIXES,
    DEFAULT_WEEKLY_HOURS,
    DEFAULT_WEEKLY_TARGET_MINUTES,
    ReportConfig,
    hours_to_minutes,
)
from timesheet_tool.consolidate import (
    build_day_records,
    days_to_frame,
    group_by_month,
    group_by_week,
    months_to_frame,
    recent_days,
    weeks_to_frame,
)
from timesheet_tool.excel_writer import ExcelLayout, write_report_xlsx
from timesheet_tool.report import render_report, status_line
from timesheet_tool.sources.timesheet_dir import TimesheetDirectory, TimesheetPaths

logger = logging.getLogger(__name__)


def _weekly_hours(value: str) -> int:
    """argparse type: weekly hours -> minutes."""
    try:
        return hours_to_minutes(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Daily, weekly and monthly worked hours from YYYY-MM-DD.md notes."
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the daily notes (default: current directory).",
    )
    parser.add_argument(
        "--weekly-hours",
        dest="weekly_target_minutes",
        type=_weekly_hours,
        default=DEFAULT_WEEKLY_TARGET_MINUTES,
        metavar="HOURS",
        help=f"Expected weekly work hours (default: {DEFAULT_WEEKLY_HOURS:g}).",
    )
    parser.add_argument(
        "--suffix",
        dest="suffixes",
        action="append",
        default=None,
        help="File suffix to read; repeatable (default: .md).",
    )
    parser.add_argument(
        "--tentative",
        action="store_true",
        help="Close today's open session at the current time (max 8h).",
    )
    parser.add_argument(
        "--summarize",
        action="store_true",
        help="Print a one-line today/week summary for status bars.",
    )
    parser.add_argument(
        "--xlsx",
        default=None,
        help="Also write the summaries to this Excel file.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show per-line parsing details.",
    )
    return parser.parse_args(argv)


def build_config(ns: argparse.Namespace) -> ReportConfig:
    """Turn parsed arguments into a report configuration."""
    suffixes = tuple(
        s if s.startswith(".") else f".{s}" for s in (ns.suffixes or DEFAULT_SUFFIXES)
    )
    return ReportConfig(
        directory=Path(ns.directory).expanduser().resolve(),
        weekly_target_minutes=ns.weekly_target_minutes,
        suffixes=suffixes,
        tentative=ns.tentative,
        summarize=ns.summarize,
        xlsx_path=Path(ns.xlsx).expanduser() if ns.xlsx else None,
        debug=ns.debug,
    )


def main() -> int:
    """Run the timesheet report CLI.

    Returns:
        Exit code (0 on success).
    """
    config = build_config(parse_args())
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    source = TimesheetDirectory(
        TimesheetPaths(root=config.directory, suffixes=config.suffixes)
    )
    source.validate()

    now = datetime.now()
    today = now.date()
    documents = source.load_documents()
    logger.debug("Read %d day files from %s", len(documents), config.directory)

    records = build_day_records(documents, now=now if config.tentative else None)
    weeks = group_by_week(records, config.weekly_target_minutes)

    if config.summarize:
        print(status_line(records, weeks, today, config.weekly_target_minutes))
        return 0

    months = group_by_month(records)
    print(render_report(recent_days(records, today), weeks, months))

    if config.xlsx_path is not None:
        write_report_xlsx(
            days_to_frame(records),
            weeks_to_frame(weeks),
            months_to_frame(months),
            config.xlsx_path,
            ExcelLayout(),
        )
        print(f"OK: Output: {config.xlsx_path}")
    return 0
