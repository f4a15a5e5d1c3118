from __future__ import annotations

from datetime import date, datetime

from timesheet_tool.consolidate import (
    build_day_record,
    build_day_records,
    day_total_minutes,
    days_to_frame,
    find_day,
    find_week,
    group_by_month,
    group_by_week,
    months_to_frame,
    recent_days,
    shortfall_minutes,
    week_shortfall,
    week_start_of,
    weeks_to_frame,
)
from timesheet_tool.model import (
    ClockTime,
    DayDocument,
    DayRecord,
    WarningKind,
    WorkInterval,
)


def _day(y: int, m: int, d: int, minutes: int) -> DayRecord:
    return DayRecord(date=date(y, m, d), total_minutes=minutes)


# --- day aggregation ---


def test_two_sessions_day() -> None:
    text = "Start work 9:00\nnotes\nStop work 12:00\nStart work 13:00\nStop work 17:30"
    record = build_day_record(date(2025, 8, 25), text)
    assert record.total_minutes == 450
    assert record.session_count == 2
    assert not record.has_issues


def test_overnight_day() -> None:
    record = build_day_record(date(2025, 8, 26), "Start work 22:00\nStop work 6:00")
    assert record.total_minutes == 480


def test_direct_durations_day() -> None:
    text = "Work time 1.5 hours\nWork time 30 minutes"
    assert build_day_record(date(2025, 8, 25), text).total_minutes == 120


def test_orphan_stop_does_not_block_other_entries() -> None:
    text = "Stop work 17:00\nStart work 9:00\nStop work 12:00"
    record = build_day_record(date(2025, 8, 25), text)
    assert record.total_minutes == 180
    assert record.has_issues
    assert record.warnings[0].kind is WarningKind.ORPHAN_STOP


def test_no_matching_lines_still_recorded() -> None:
    record = build_day_record(date(2025, 8, 25), "# Notes\n\nHad meetings.")
    assert record.total_minutes == 0
    assert record.session_count == 0
    assert not record.has_issues


def test_holiday_counts_once() -> None:
    once = build_day_record(date(2025, 8, 25), "Stat holiday")
    many = build_day_record(
        date(2025, 8, 25), "Stat holiday\nPTO\nHoliday day\nStatutory holiday again"
    )
    assert once.total_minutes == 480
    assert many.total_minutes == 480
    assert many.holiday_applied


def test_holiday_mixed_with_other_entries() -> None:
    text = "Start work 9:00\nStop work 12:00\nStat holiday\nWork time 1 hour extra"
    assert build_day_record(date(2025, 8, 25), text).total_minutes == 180 + 480 + 60


def test_malformed_line_contributes_nothing() -> None:
    record = build_day_record(date(2025, 8, 25), "Start work 25:00\nStop work 12:70")
    assert record.total_minutes == 0
    assert {w.kind for w in record.warnings} == {WarningKind.MALFORMED}


def test_oversized_work_time_is_flagged_not_fatal() -> None:
    text = "Start work 9:00\nStop work 12:00\nWork time " + "1" * 29 + " minutes"
    record = build_day_record(date(2025, 8, 25), text)
    assert record.total_minutes == 180
    assert [w.kind for w in record.warnings] == [WarningKind.MALFORMED]
    assert record.warnings[0].line_no == 3


def test_open_start_without_now_is_not_counted() -> None:
    record = build_day_record(date(2025, 8, 25), "Start work 9:00")
    assert record.total_minutes == 0
    assert not record.tentative
    assert record.has_issues


def test_tentative_close_only_for_today() -> None:
    now = datetime(2025, 8, 25, 11, 30)
    today = build_day_record(date(2025, 8, 25), "Start work 9:00", now=now)
    assert today.total_minutes == 150
    assert today.tentative
    assert not today.has_issues

    other = build_day_record(date(2025, 8, 24), "Start work 9:00", now=now)
    assert other.total_minutes == 0
    assert not other.tentative


def test_tentative_keeps_replaced_start_warning() -> None:
    now = datetime(2025, 8, 25, 22, 0)
    text = "Start work 8:00\nStop work 12:00\nStart work 13:00\nStart work 14:00"
    record = build_day_record(date(2025, 8, 25), text, now=now)
    assert record.total_minutes == 240 + 480
    assert record.tentative
    assert [w.line_no for w in record.warnings] == [3]


def test_day_total_minutes() -> None:
    intervals = [WorkInterval(ClockTime(9, 0), ClockTime(10, 0))]
    assert day_total_minutes(intervals, [15], holiday=False) == 75
    assert day_total_minutes([], [], holiday=True) == 480
    assert day_total_minutes([], [], holiday=False) == 0


def test_build_day_records_sorted() -> None:
    docs = [
        DayDocument(day=date(2025, 8, 26), text="Work time 1 hour"),
        DayDocument(day=date(2025, 8, 25), text="Work time 2 hours"),
    ]
    records = build_day_records(docs)
    assert [r.date for r in records] == [date(2025, 8, 25), date(2025, 8, 26)]
    assert [r.total_minutes for r in records] == [120, 60]


# --- calendar aggregation ---


def test_week_start_of() -> None:
    assert week_start_of(date(2025, 8, 25)) == date(2025, 8, 25)
    assert week_start_of(date(2025, 8, 31)) == date(2025, 8, 25)
    assert week_start_of(date(2025, 9, 1)) == date(2025, 9, 1)
    assert week_start_of(date(2024, 3, 1)) == date(2024, 2, 26)


def test_group_by_week() -> None:
    records = [
        _day(2025, 8, 25, 480),
        _day(2025, 8, 26, 420),
        _day(2025, 9, 1, 360),
    ]
    weeks = group_by_week(records, target_minutes=2400)
    assert [w.week_start for w in weeks] == [date(2025, 8, 25), date(2025, 9, 1)]
    assert weeks[0].week_end == date(2025, 8, 31)
    assert weeks[0].total_minutes == 900
    assert weeks[0].day_count == 2
    assert weeks[1].total_minutes == 360


def test_group_by_week_unsorted_input_across_year() -> None:
    records = [_day(2026, 1, 2, 60), _day(2025, 12, 29, 60), _day(2025, 12, 20, 30)]
    weeks = group_by_week(records)
    assert [w.week_start for w in weeks] == [date(2025, 12, 15), date(2025, 12, 29)]
    assert weeks[1].total_minutes == 120


def test_shortfall_scenario() -> None:
    minutes = [480, 480, 480, 300, 300]
    records = [_day(2025, 8, 25 + i, m) for i, m in enumerate(minutes)]
    week = group_by_week(records, target_minutes=2400)[0]
    assert week.total_minutes == 2040
    assert week.shortfall_minutes == 360


def test_shortfall_absent_when_target_met() -> None:
    records = [_day(2025, 8, 25 + i, 480) for i in range(5)]
    week = group_by_week(records, target_minutes=2400)[0]
    assert week.shortfall_minutes is None
    assert shortfall_minutes(2400, week.total_minutes) == 0


def test_shortfall_functions() -> None:
    assert shortfall_minutes(2400, 2040) == 360
    assert shortfall_minutes(2400, 2500) == 0
    assert week_shortfall(2400, 2400) is None
    assert week_shortfall(2400, 2399) == 1


def test_group_by_month_ignores_week_boundaries() -> None:
    records = [_day(2025, 8, 29, 100), _day(2025, 9, 1, 200), _day(2025, 9, 30, 50)]
    months = group_by_month(records)
    assert [(m.year, m.month, m.total_minutes) for m in months] == [
        (2025, 8, 100),
        (2025, 9, 250),
    ]


def test_groupings_partition_days() -> None:
    records = [_day(2024, 2, d, d * 10) for d in range(1, 30)]
    weeks = group_by_week(records)
    months = group_by_month(records)
    total = sum(r.total_minutes for r in records)
    assert sum(w.total_minutes for w in weeks) == total
    assert sum(m.total_minutes for m in months) == total
    assert sum(w.day_count for w in weeks) == len(records)


def test_groupings_empty() -> None:
    assert group_by_week([]) == []
    assert group_by_month([]) == []
    assert days_to_frame([]).empty


def test_recent_days_window() -> None:
    today = date(2025, 9, 14)
    records = [
        _day(2025, 8, 31, 60),
        _day(2025, 9, 1, 60),
        _day(2025, 9, 14, 0),
        _day(2025, 9, 15, 60),
        _day(2025, 9, 5, 30),
    ]
    out = recent_days(records, today)
    assert [r.date for r in out] == [
        date(2025, 9, 1),
        date(2025, 9, 5),
        date(2025, 9, 14),
    ]


def test_find_day_and_week() -> None:
    records = [_day(2025, 8, 25, 60)]
    weeks = group_by_week(records)
    assert find_day(records, date(2025, 8, 25)) == records[0]
    assert find_day(records, date(2025, 8, 26)) is None
    assert find_week(weeks, date(2025, 8, 31)) == weeks[0]
    assert find_week(weeks, date(2025, 9, 1)) is None


def test_frames() -> None:
    records = [_day(2025, 8, 26, 60), _day(2025, 8, 25, 2400)]
    df = days_to_frame(records)
    assert list(df["date"]) == [date(2025, 8, 25), date(2025, 8, 26)]

    weeks_df = weeks_to_frame(group_by_week(records, target_minutes=2400))
    assert list(weeks_df.columns) == [
        "week_start",
        "week_end",
        "day_count",
        "total_minutes",
        "shortfall",
    ]
    assert weeks_df.loc[0, "total_minutes"] == 2460

    months_df = months_to_frame(group_by_month(records))
    assert months_df.loc[0, "month"] == 8
    assert weeks_to_frame([]).empty
    assert months_to_frame([]).empty
