"""Formato de texto para los resúmenes diario, semanal y mensual."""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import date

from timesheet_tool.consolidate import find_day, find_week, shortfall_minutes
from timesheet_tool.model import DayRecord, MonthRecord, WeekRecord


def format_duration(minutes: int) -> str:
    """Render minutes as ``8h 30m``."""
    hours, mins = divmod(max(0, int(minutes)), 60)
    return f"{hours}h {mins:02d}m"


def format_day_duration(record: DayRecord) -> str:
    """Duration plus ``*`` (tentative) and ``E!`` (issues) markers."""
    flags = []
    if record.tentative:
        flags.append("*")
    if record.has_issues:
        flags.append("E!")
    text = format_duration(record.total_minutes)
    if flags:
        return f"{text} {' '.join(flags)}"
    return text


def month_label(year: int, month: int) -> str:
    if not 1 <= month <= 12:
        return f"Unknown {year}"
    return f"{calendar.month_name[month]} {year}"


def daily_lines(records: Sequence[DayRecord]) -> list[str]:
    return [
        f"{r.date.isoformat()} {r.date.strftime('%a'):3} - {format_day_duration(r)}"
        for r in records
    ]


def weekly_lines(weeks: Sequence[WeekRecord]) -> list[str]:
    lines: list[str] = []
    for w in weeks:
        line = (
            f"Week of {w.week_start.isoformat()} - {w.week_end.isoformat()}: "
            f"{format_duration(w.total_minutes)}"
        )
        if w.shortfall_minutes:
            line += f" [{format_duration(w.shortfall_minutes)} short]"
        lines.append(line)
    return lines


def monthly_lines(months: Sequence[MonthRecord]) -> list[str]:
    return [
        f"{month_label(m.year, m.month)}: {format_duration(m.total_minutes)}"
        for m in months
    ]


def render_report(
    days: Sequence[DayRecord],
    weeks: Sequence[WeekRecord],
    months: Sequence[MonthRecord],
) -> str:
    """Full text report: recent days, then months, then weeks.

    Args:
        days: Records of the recent-days window.
        weeks: All week records.
        months: All month records.

    Returns:
        Multi-line report text.
    """
    sections = [
        ("Daily Summary (Last 2 Weeks):", daily_lines(days)),
        ("Monthly Summary:", monthly_lines(months)),
        ("Weekly Summary:", weekly_lines(weeks)),
    ]
    lines: list[str] = []
    for title, body in sections:
        if lines:
            lines.append("")
        lines.append(title)
        lines.append("=" * len(title))
        lines.extend(body or ["No data"])
    return "\n".join(lines)


def status_line(
    records: Sequence[DayRecord],
    weeks: Sequence[WeekRecord],
    today: date,
    target_minutes: int,
) -> str:
    """Compact ``Today: ... | Week: ...`` line for status bars."""
    day = find_day(records, today)
    week = find_week(weeks, today)

    day_text = format_day_duration(day) if day is not None else "No data"
    if week is None:
        week_text = "No data"
    else:
        week_text = format_duration(week.total_minutes)
        missing = shortfall_minutes(target_minutes, week.total_minutes)
        if missing > 0:
            week_text += f" ({missing / 60:.1f}h short)"
    return f"Today: {day_text} | Week: {week_text}"
