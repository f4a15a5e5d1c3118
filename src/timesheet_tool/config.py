"""Configuración del reporte (objetivo semanal, directorio, opciones)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path

DEFAULT_WEEKLY_HOURS = 40.0
DEFAULT_SUFFIXES: tuple[str, ...] = (".md",)
RECENT_DAYS = 14


def hours_to_minutes(hours: float | str) -> int:
    """Convert a weekly target in hours to whole minutes.

    Args:
        hours: Positive number of hours; fractions are allowed.

    Returns:
        Target in minutes, rounded half-up.

    Raises:
        ValueError: If the value is not a positive finite number.
    """
    value = float(hours)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Weekly hours must be a positive number, got {hours!r}")
    try:
        minutes = (Decimal(str(value)) * 60).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
    except InvalidOperation as exc:
        raise ValueError(f"Weekly hours out of range: {hours!r}") from exc
    if minutes <= 0:
        raise ValueError(f"Weekly hours too small: {hours!r}")
    return int(minutes)


DEFAULT_WEEKLY_TARGET_MINUTES = hours_to_minutes(DEFAULT_WEEKLY_HOURS)


@dataclass(frozen=True)
class ReportConfig:
    """Options for one report run."""

    directory: Path
    weekly_target_minutes: int = DEFAULT_WEEKLY_TARGET_MINUTES
    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES
    tentative: bool = False
    summarize: bool = False
    xlsx_path: Path | None = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.weekly_target_minutes <= 0:
            raise ValueError("weekly_target_minutes must be positive")
