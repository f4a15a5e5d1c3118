"""Lectura de un directorio de notas diarias ``YYYY-MM-DD.md``."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import cast

import pandas as pd

from timesheet_tool.config import DEFAULT_SUFFIXES
from timesheet_tool.model import DayDocument
from timesheet_tool.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)

_DATE_STEM_RX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class TimesheetPaths(SourcePaths):
    """Paths for a folder of daily notes."""

    # root: folder containing 2025-08-25.md, 2025-08-26.md, ...
    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES


class TimesheetDirectory(DataSource):
    """Daily notes folder, one file per calendar date."""

    _paths: TimesheetPaths

    def validate(self) -> None:
        """Validate that the notes directory exists."""
        if not self._paths.root.is_dir():
            raise FileNotFoundError(str(self._paths.root))

    def day_files(self) -> list[tuple[date, Path]]:
        """Return ``(date, path)`` for files named after a date, by date."""
        suffixes = {s.lower() for s in self._paths.suffixes}
        out: list[tuple[date, Path]] = []
        for path in self._paths.root.iterdir():
            if not path.is_file() or path.suffix.lower() not in suffixes:
                continue
            day = _date_from_filename(path)
            if day is None:
                logger.debug("Skipping %s: name is not a date", path.name)
                continue
            out.append((day, path))
        out.sort(key=lambda item: (item[0], item[1].name))
        return out

    def load_documents(self) -> list[DayDocument]:
        """Read every dated file; unreadable files are logged and left out.

        Returns:
            One document per readable file, ordered by date.
        """
        docs: list[DayDocument] = []
        for day, path in self.day_files():
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Cannot read %s: %s", path, exc)
                continue
            docs.append(DayDocument(day=day, text=text))
        return docs


def _date_from_filename(path: Path) -> date | None:
    if not _DATE_STEM_RX.match(path.stem):
        return None
    parsed = pd.to_datetime(path.stem, format="%Y-%m-%d", errors="coerce")
    if pd.isna(parsed):
        return None
    return cast(date, parsed.date())
