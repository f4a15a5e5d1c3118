"""Exportación a Excel de los resúmenes diario, semanal y mensual."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "date": "Date",
    "total_minutes": "Worked (h)",
    "session_count": "Sessions",
    "holiday": "Holiday",
    "tentative": "Tentative",
    "has_issues": "Issues",
    "week_start": "Week start",
    "week_end": "Week end",
    "day_count": "Days",
    "shortfall": "Short (h)",
    "year": "Year",
    "month": "Month",
}

_HOUR_COLUMNS = ("total_minutes", "shortfall")


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the report workbook."""

    daily_sheet: str = "Daily"
    weekly_sheet: str = "Weekly"
    monthly_sheet: str = "Monthly"


def _weekday_label(day: object) -> str:
    """Three-letter weekday of a date cell; empty for missing dates."""
    if pd.isna(day):
        return ""
    return _WEEKDAYS[pd.Timestamp(day).weekday()]


def _add_weekday_column(export_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday a partir de date."""
    if "date" not in export_df.columns or export_df.empty:
        return export_df
    export_df = export_df.copy()
    export_df["weekday"] = export_df["date"].map(_weekday_label)
    cols = ["weekday"] + [c for c in export_df.columns if c != "weekday"]
    return export_df[cols]


def _minutes_to_hours(export_df: pd.DataFrame) -> pd.DataFrame:
    """Convierte columnas en minutos a horas decimales."""
    export_df = export_df.copy()
    for col in _HOUR_COLUMNS:
        if col in export_df.columns:
            export_df[col] = pd.to_numeric(export_df[col], errors="coerce") / 60
    return export_df


def _month_names(export_df: pd.DataFrame) -> pd.DataFrame:
    if "month" not in export_df.columns:
        return export_df
    export_df = export_df.copy()
    export_df["month"] = export_df["month"].map(
        lambda m: calendar.month_name[int(m)] if 1 <= int(m) <= 12 else ""
    )
    return export_df


def _prepare(df: pd.DataFrame) -> pd.DataFrame:
    export_df = _add_weekday_column(df)
    export_df = _minutes_to_hours(export_df)
    export_df = _month_names(export_df)
    return export_df.rename(columns=_HEADER_MAP)


def write_report_xlsx(
    days: pd.DataFrame,
    weeks: pd.DataFrame,
    months: pd.DataFrame,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write the three summaries to a formatted workbook.

    Args:
        days: Day frame (see ``days_to_frame``).
        weeks: Week frame (see ``weeks_to_frame``).
        months: Month frame (see ``months_to_frame``).
        out_path: Output path for the XLSX file.
        layout: Sheet names.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = [
        (layout.daily_sheet, days),
        (layout.weekly_sheet, weeks),
        (layout.monthly_sheet, months),
    ]
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for name, df in sheets:
            _prepare(df).to_excel(writer, index=False, sheet_name=name)
            _format_sheet(writer.book[name])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    widths = [
        ("Day", 6),
        ("Date", 12),
        ("Week start", 12),
        ("Week end", 12),
        ("Worked (h)", 11),
        ("Short (h)", 10),
        ("Month", 11),
    ]
    for header, width in widths:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    fmt_map: dict[str, str] = {
        "Date": "yyyy-mm-dd",
        "Week start": "yyyy-mm-dd",
        "Week end": "yyyy-mm-dd",
        "Worked (h)": "0.00",
        "Short (h)": "0.00",
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
