"""Punto de entrada: ``python -m timesheet_tool``."""

from __future__ import annotations

from timesheet_tool.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
