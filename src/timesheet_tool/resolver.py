"""Resolución de sesiones start/stop de un día (máquina de dos estados)."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, cast

from timesheet_tool.model import (
    MINUTES_PER_DAY,
    ClockTime,
    DirectDuration,
    Event,
    HolidayMarker,
    ParseWarning,
    StartWork,
    StopWork,
    WarningKind,
    WorkInterval,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Whether a start is currently waiting for its stop."""

    IDLE = "idle"
    AWAITING_STOP = "awaiting_stop"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving one document's events."""

    intervals: tuple[WorkInterval, ...] = ()
    direct_minutes: tuple[int, ...] = ()
    holiday: bool = False
    warnings: tuple[ParseWarning, ...] = ()
    pending_start: StartWork | None = None


@dataclass
class _Scan:
    state: SessionState = SessionState.IDLE
    open_start: StartWork | None = None
    intervals: list[WorkInterval] = field(default_factory=list)
    direct_minutes: list[int] = field(default_factory=list)
    holiday: bool = False
    warnings: list[ParseWarning] = field(default_factory=list)

    def abandon(self, start: StartWork, reason: str) -> None:
        self.warnings.append(
            ParseWarning(
                kind=WarningKind.ABANDONED_START,
                line_no=start.line_no,
                message=f"Start work at {start.time} {reason}",
            )
        )
        logger.info(
            "Line %s: start at %s abandoned (%s)", start.line_no, start.time, reason
        )


def _open(scan: _Scan, event: StartWork) -> None:
    scan.open_start = event
    scan.state = SessionState.AWAITING_STOP


def _reopen(scan: _Scan, event: StartWork) -> None:
    if scan.open_start is not None:
        scan.abandon(scan.open_start, f"replaced by start at {event.time}")
    scan.open_start = event


def _close(scan: _Scan, event: StopWork) -> None:
    start = cast(StartWork, scan.open_start)
    interval = WorkInterval(start=start.time, stop=event.time)
    logger.debug(
        "Line %s: session %s-%s (%s min)",
        event.line_no,
        interval.start,
        interval.stop,
        interval.duration_minutes,
    )
    scan.intervals.append(interval)
    scan.open_start = None
    scan.state = SessionState.IDLE


def _orphan(scan: _Scan, event: StopWork) -> None:
    scan.warnings.append(
        ParseWarning(
            kind=WarningKind.ORPHAN_STOP,
            line_no=event.line_no,
            message=f"Stop work at {event.time} without a matching start",
        )
    )
    logger.info("Line %s: orphan stop at %s", event.line_no, event.time)


def _direct(scan: _Scan, event: DirectDuration) -> None:
    scan.direct_minutes.append(event.minutes)


def _holiday(scan: _Scan, _: Event) -> None:
    scan.holiday = True


TRANSITIONS: dict[tuple[SessionState, type], Callable[[_Scan, Any], None]] = {
    (SessionState.IDLE, StartWork): _open,
    (SessionState.IDLE, StopWork): _orphan,
    (SessionState.IDLE, DirectDuration): _direct,
    (SessionState.IDLE, HolidayMarker): _holiday,
    (SessionState.AWAITING_STOP, StartWork): _reopen,
    (SessionState.AWAITING_STOP, StopWork): _close,
    (SessionState.AWAITING_STOP, DirectDuration): _direct,
    (SessionState.AWAITING_STOP, HolidayMarker): _holiday,
}


def resolve_sessions(events: Iterable[Event]) -> Resolution:
    """Pair start/stop events of one document in order.

    A start that is replaced by another start, or still open at the end of
    the document, produces no interval. A stop with no open start is
    dropped. Both cases are reported as warnings.

    Args:
        events: Classified events in document order.

    Returns:
        Intervals, direct durations, holiday flag and warnings.
    """
    scan = _Scan()
    for event in events:
        TRANSITIONS[(scan.state, type(event))](scan, event)

    pending = scan.open_start
    if pending is not None:
        scan.abandon(pending, "has no stop before end of file")

    return Resolution(
        intervals=tuple(scan.intervals),
        direct_minutes=tuple(scan.direct_minutes),
        holiday=scan.holiday,
        warnings=tuple(scan.warnings),
        pending_start=pending,
    )


def tentative_interval(
    start: ClockTime, now: ClockTime, cap_minutes: int = 8 * 60
) -> WorkInterval:
    """Close an open start at ``now``, capped at ``cap_minutes`` after it."""
    interval = WorkInterval(start=start, stop=now, tentative=True)
    if interval.duration_minutes <= cap_minutes:
        return interval
    capped = (start.minutes + cap_minutes) % MINUTES_PER_DAY
    return WorkInterval(
        start=start,
        stop=ClockTime(hour=capped // 60, minute=capped % 60),
        tentative=True,
    )
