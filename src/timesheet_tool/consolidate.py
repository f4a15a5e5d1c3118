"""Consolidación de días, semanas y meses (totales + faltante semanal)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import cast

import pandas as pd
from dateutil.relativedelta import MO, relativedelta

from timesheet_tool.classify import classify_document
from timesheet_tool.config import DEFAULT_WEEKLY_TARGET_MINUTES, RECENT_DAYS
from timesheet_tool.model import (
    HOLIDAY_MINUTES,
    ClockTime,
    DayDocument,
    DayRecord,
    MonthRecord,
    WarningKind,
    WeekRecord,
    WorkInterval,
)
from timesheet_tool.resolver import resolve_sessions, tentative_interval

logger = logging.getLogger(__name__)

DAY_COLUMNS = [
    "date",
    "total_minutes",
    "session_count",
    "holiday",
    "tentative",
    "has_issues",
]


def day_total_minutes(
    intervals: Iterable[WorkInterval],
    direct_minutes: Iterable[int],
    holiday: bool,
) -> int:
    """Sum sessions, direct entries and (once) the holiday credit."""
    total = sum(i.duration_minutes for i in intervals) + sum(direct_minutes)
    if holiday:
        total += HOLIDAY_MINUTES
    return total


def build_day_record(day: date, text: str, now: datetime | None = None) -> DayRecord:
    """Parse one day's document into its total.

    Args:
        day: Date the document belongs to.
        text: Full document text.
        now: When given and ``day`` is ``now``'s date, a start left open at
            the end of the document is closed tentatively at ``now``.

    Returns:
        Day record; a document without recognized lines totals 0.
    """
    logger.debug("Parsing %s (%d lines)", day, len(text.splitlines()))
    classified = classify_document(text)
    resolution = resolve_sessions(classified.events)

    intervals = list(resolution.intervals)
    warnings = [*classified.warnings, *resolution.warnings]
    pending = resolution.pending_start
    tentative = False
    if pending is not None and now is not None and now.date() == day:
        clock = ClockTime(hour=now.hour, minute=now.minute)
        intervals.append(tentative_interval(pending.time, clock))
        warnings = [
            w
            for w in warnings
            if not (
                w.kind is WarningKind.ABANDONED_START and w.line_no == pending.line_no
            )
        ]
        tentative = True
        logger.debug("%s: open start at %s closed tentatively", day, pending.time)

    for warning in warnings:
        if warning.kind is WarningKind.MALFORMED:
            logger.warning("%s line %s: %s", day, warning.line_no, warning.message)

    total = day_total_minutes(intervals, resolution.direct_minutes, resolution.holiday)
    logger.debug(
        "%s: %d sessions, %d direct min, holiday=%s, total %d min",
        day,
        len(intervals),
        sum(resolution.direct_minutes),
        resolution.holiday,
        total,
    )
    return DayRecord(
        date=day,
        total_minutes=total,
        session_count=len(intervals),
        holiday_applied=resolution.holiday,
        tentative=tentative,
        warnings=tuple(warnings),
    )


def build_day_records(
    documents: Iterable[DayDocument], now: datetime | None = None
) -> list[DayRecord]:
    """Build one record per document, ordered by date."""
    records = [build_day_record(doc.day, doc.text, now=now) for doc in documents]
    return sorted(records, key=lambda r: r.date)


def week_start_of(day: date) -> date:
    """Monday of the week containing ``day``."""
    return cast(date, day + relativedelta(weekday=MO(-1)))


def shortfall_minutes(target_minutes: int, total_minutes: int) -> int:
    """Minutes missing to reach the weekly target (0 when met)."""
    return max(0, target_minutes - total_minutes)


def week_shortfall(target_minutes: int, total_minutes: int) -> int | None:
    """Like :func:`shortfall_minutes` but None when the target is met."""
    missing = shortfall_minutes(target_minutes, total_minutes)
    return missing if missing > 0 else None


def days_to_frame(records: Sequence[DayRecord]) -> pd.DataFrame:
    """Convert day records to a DataFrame ordered by date."""
    rows = [
        {
            "date": r.date,
            "total_minutes": r.total_minutes,
            "session_count": r.session_count,
            "holiday": r.holiday_applied,
            "tentative": r.tentative,
            "has_issues": r.has_issues,
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=DAY_COLUMNS)
    return pd.DataFrame(rows).sort_values("date").reset_index(drop=True)


def recent_days(
    records: Sequence[DayRecord], today: date, days: int = RECENT_DAYS
) -> list[DayRecord]:
    """Records of the last ``days`` calendar days, today included.

    Days without a document are omitted, not filled with zeros.
    """
    first = today - timedelta(days=days - 1)
    return sorted(
        (r for r in records if first <= r.date <= today), key=lambda r: r.date
    )


def group_by_week(
    records: Sequence[DayRecord],
    target_minutes: int = DEFAULT_WEEKLY_TARGET_MINUTES,
) -> list[WeekRecord]:
    """Group all days into Monday-Sunday weeks, in chronological order."""
    df = days_to_frame(records)
    if df.empty:
        return []
    df["week_start"] = df["date"].map(week_start_of)
    g = df.groupby("week_start", as_index=False).agg(
        total_minutes=("total_minutes", "sum"),
        day_count=("date", "count"),
    )
    out: list[WeekRecord] = []
    for row in g.sort_values("week_start").itertuples(index=False):
        start = cast(date, row.week_start)
        total = int(row.total_minutes)
        out.append(
            WeekRecord(
                week_start=start,
                week_end=start + timedelta(days=6),
                total_minutes=total,
                shortfall_minutes=week_shortfall(target_minutes, total),
                day_count=int(row.day_count),
            )
        )
    return out


def group_by_month(records: Sequence[DayRecord]) -> list[MonthRecord]:
    """Group all days by calendar month, in chronological order."""
    df = days_to_frame(records)
    if df.empty:
        return []
    df["year"] = df["date"].map(lambda d: d.year)
    df["month"] = df["date"].map(lambda d: d.month)
    g = df.groupby(["year", "month"], as_index=False).agg(
        total_minutes=("total_minutes", "sum")
    )
    return [
        MonthRecord(
            year=int(row.year),
            month=int(row.month),
            total_minutes=int(row.total_minutes),
        )
        for row in g.sort_values(["year", "month"]).itertuples(index=False)
    ]


def find_week(weeks: Sequence[WeekRecord], day: date) -> WeekRecord | None:
    """Week record whose span contains ``day``, if any."""
    for week in weeks:
        if week.week_start <= day <= week.week_end:
            return week
    return None


def find_day(records: Sequence[DayRecord], day: date) -> DayRecord | None:
    for record in records:
        if record.date == day:
            return record
    return None


def weeks_to_frame(weeks: Sequence[WeekRecord]) -> pd.DataFrame:
    """Week records as a DataFrame; shortfall is empty when the target is met."""
    columns = ["week_start", "week_end", "day_count", "total_minutes", "shortfall"]
    if not weeks:
        return pd.DataFrame(columns=columns)
    rows = [
        {
            "week_start": w.week_start,
            "week_end": w.week_end,
            "day_count": w.day_count,
            "total_minutes": w.total_minutes,
            "shortfall": w.shortfall_minutes,
        }
        for w in weeks
    ]
    return pd.DataFrame(rows, columns=columns)


def months_to_frame(months: Sequence[MonthRecord]) -> pd.DataFrame:
    columns = ["year", "month", "total_minutes"]
    if not months:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [
            {"year": m.year, "month": m.month, "total_minutes": m.total_minutes}
            for m in months
        ],
        columns=columns,
    )
