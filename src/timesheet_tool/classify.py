"""Clasificación de líneas de texto libre en eventos de timesheet."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from timesheet_tool.model import (
    ClockTime,
    DirectDuration,
    Event,
    HolidayMarker,
    ParseWarning,
    StartWork,
    StopWork,
    WarningKind,
)

logger = logging.getLogger(__name__)

# Digit-led token, optionally followed by a meridiem.
_TIME_VALUE = (
    r"(?P<value>\d+(?:[:.]\d+)*)"
    r"(?:\s*(?P<meridiem>[ap]\.?\s*m\.?)(?![a-z]))?"
)

_START_RX = re.compile(
    r"\bstart(?:ed)?\s+work(?:ing)?(?:\s+at)?\s+" + _TIME_VALUE, re.IGNORECASE
)
_STOP_RX = re.compile(
    r"\bstop(?:ped)?\s+work(?:ing)?(?:\s+at)?\s+" + _TIME_VALUE, re.IGNORECASE
)
_WORK_TIME_RX = re.compile(
    r"\bwork\s+time\s+(?P<value>\d[\d.,:]*)(?:\s*(?P<unit>[a-z]+))?", re.IGNORECASE
)
_UNIT_RX = re.compile(r"^(?:hours?|minutes?)$", re.IGNORECASE)
_HOLIDAY_RX = re.compile(
    r"\b(?:stat(?:utory)?\s+holiday|pto|holiday\s+day)\b", re.IGNORECASE
)
_DECIMAL_RX = re.compile(r"^\d+(?:\.\d+)?$")


class MalformedLineError(ValueError):
    """A recognized phrase carries an unparseable time or number."""


@dataclass(frozen=True)
class ClassifiedDocument:
    """Events of one document in line order plus malformed-line warnings."""

    events: tuple[Event, ...]
    warnings: tuple[ParseWarning, ...]


def _clock_from_match(match: re.Match[str]) -> ClockTime:
    text = match.group("value")
    if match.group("meridiem"):
        text = f"{text} {match.group('meridiem')}"
    try:
        return ClockTime.parse(text)
    except ValueError as exc:
        raise MalformedLineError(f"Invalid time {text!r}") from exc


def _start(match: re.Match[str], line_no: int | None) -> Event:
    return StartWork(_clock_from_match(match), line_no=line_no)


def _stop(match: re.Match[str], line_no: int | None) -> Event:
    return StopWork(_clock_from_match(match), line_no=line_no)


def _work_time(match: re.Match[str], line_no: int | None) -> Event:
    unit = match.group("unit") or ""
    if not _UNIT_RX.match(unit):
        raise MalformedLineError(f"Invalid unit {unit!r}, expected hours or minutes")
    return DirectDuration(
        amount_to_minutes(match.group("value"), unit),
        line_no=line_no,
    )


def _holiday(_: re.Match[str], line_no: int | None) -> Event:
    return HolidayMarker(line_no=line_no)


# Most specific phrase first; the first matching rule wins.
RULES: tuple[tuple[str, re.Pattern[str], Callable[..., Event]], ...] = (
    ("start", _START_RX, _start),
    ("stop", _STOP_RX, _stop),
    ("work_time", _WORK_TIME_RX, _work_time),
    ("holiday", _HOLIDAY_RX, _holiday),
)


def amount_to_minutes(value: str, unit: str) -> int:
    """Convert ``1.5`` + ``hours`` into whole minutes (half-up rounding).

    Raises:
        MalformedLineError: If ``value`` is not an integer or simple decimal,
            or is too large to round to whole minutes.
    """
    if not _DECIMAL_RX.match(value):
        raise MalformedLineError(f"Invalid amount {value!r}")
    amount = Decimal(value)
    if unit.lower().startswith("hour"):
        amount *= 60
    try:
        return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        raise MalformedLineError(f"Amount out of range {value!r}") from exc


def classify_line(line: str, line_no: int | None = None) -> Event | None:
    """Classify one line of a day's log.

    Args:
        line: Raw text line.
        line_no: Optional 1-based line number kept on the event.

    Returns:
        The matching event, or None for ordinary prose.

    Raises:
        MalformedLineError: If a phrase matched but its value is invalid.
    """
    for name, rx, build in RULES:
        match = rx.search(line)
        if match is None:
            continue
        event = build(match, line_no)
        logger.debug("Line %s: %s -> %r", line_no, name, event)
        return event
    return None


def classify_document(text: str) -> ClassifiedDocument:
    """Classify every line of ``text``; malformed lines become warnings."""
    events: list[Event] = []
    warnings: list[ParseWarning] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        try:
            event = classify_line(line, line_no)
        except MalformedLineError as exc:
            warnings.append(
                ParseWarning(
                    kind=WarningKind.MALFORMED,
                    line_no=line_no,
                    message=f"{exc} in {line.strip()!r}",
                )
            )
            continue
        if event is not None:
            events.append(event)
    return ClassifiedDocument(events=tuple(events), warnings=tuple(warnings))
