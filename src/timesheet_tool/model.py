"""Modelos tipados para eventos, intervalos y resúmenes de calendario."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

MINUTES_PER_DAY = 24 * 60
HOLIDAY_MINUTES = 8 * 60

_CLOCK_RX = re.compile(
    r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})"
    r"(?:\s*(?P<meridiem>[ap])\.?\s*m\.?)?$",
    re.IGNORECASE,
)


@dataclass(frozen=True, order=True)
class ClockTime:
    """Naive wall-clock value (no date, no timezone)."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise ValueError(f"Invalid clock time {self.hour}:{self.minute:02d}")

    @classmethod
    def parse(cls, text: str) -> ClockTime:
        """Parse ``17:30``, ``9:05``, ``5:30 pm`` or ``12:15am``.

        Args:
            text: Clock value as written in the log line.

        Returns:
            Parsed clock time.

        Raises:
            ValueError: If the text is not a valid 24h or 12h time.
        """
        match = _CLOCK_RX.match(text.strip())
        if not match:
            raise ValueError(f"Unrecognized time: {text!r}")
        hour = int(match.group("hour"))
        minute = int(match.group("minute"))
        meridiem = match.group("meridiem")
        if meridiem is not None:
            if not 1 <= hour <= 12:
                raise ValueError(f"Invalid 12-hour time: {text!r}")
            hour = hour % 12
            if meridiem.lower() == "p":
                hour += 12
        return cls(hour=hour, minute=minute)

    @property
    def minutes(self) -> int:
        """Minutes since midnight."""
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class StartWork:
    """A work session starts at ``time``."""

    time: ClockTime
    line_no: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class StopWork:
    """A work session stops at ``time``."""

    time: ClockTime
    line_no: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class DirectDuration:
    """Flat amount of work logged without a start/stop pair."""

    minutes: int
    line_no: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.minutes < 0:
            raise ValueError("Direct duration cannot be negative")


@dataclass(frozen=True)
class HolidayMarker:
    """Statutory holiday / PTO day, credited as a full 8h day."""

    line_no: int | None = field(default=None, compare=False)


Event = StartWork | StopWork | DirectDuration | HolidayMarker


@dataclass(frozen=True)
class WorkInterval:
    """Resolved start/stop session."""

    start: ClockTime
    stop: ClockTime
    tentative: bool = False

    @property
    def crossed_midnight(self) -> bool:
        return self.stop.minutes < self.start.minutes

    @property
    def duration_minutes(self) -> int:
        return (self.stop.minutes - self.start.minutes) % MINUTES_PER_DAY


class WarningKind(Enum):
    """Non-fatal problems found while reading one day's log."""

    MALFORMED = "malformed"
    ORPHAN_STOP = "orphan_stop"
    ABANDONED_START = "abandoned_start"


@dataclass(frozen=True)
class ParseWarning:
    """One diagnostic attached to a line of a day's document."""

    kind: WarningKind
    line_no: int | None
    message: str


@dataclass(frozen=True)
class DayRecord:
    """Worked total for one dated document."""

    date: date
    total_minutes: int
    session_count: int = 0
    holiday_applied: bool = False
    tentative: bool = False
    warnings: tuple[ParseWarning, ...] = ()

    @property
    def has_issues(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class WeekRecord:
    """Monday-to-Sunday total with its shortfall against the weekly target."""

    week_start: date
    week_end: date
    total_minutes: int
    shortfall_minutes: int | None = None
    day_count: int = 0


@dataclass(frozen=True)
class MonthRecord:
    """Calendar month total."""

    year: int
    month: int
    total_minutes: int


@dataclass(frozen=True)
class DayDocument:
    """Text of one dated timesheet file."""

    day: date
    text: str
