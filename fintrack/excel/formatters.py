"""
Cell and row formatting helpers for exported workbooks.
"""
from __future__ import annotations

import datetime as dt

from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fintrack.excel.styles import (
    ALTERNATE_FILL,
    CENTER,
    CURRENCY_FORMAT,
    DATA_FONT,
    DATE_FORMAT,
    HEADER_BORDER,
    HEADER_FILL,
    HEADER_FONT,
    HIGHLIGHT_FILLS,
    KPI_LABEL_FONT,
    KPI_VALUE_FONT,
    LEFT,
    PERCENT_FORMAT,
    RIGHT,
    THIN_BORDER,
    TOTAL_BORDER,
    TOTAL_FILL,
    TOTAL_FONT,
)

NUMERIC_TYPES = ("currency", "percent", "number")

_NUMBER_FORMATS = {
    "currency": CURRENCY_FORMAT,
    "percent": PERCENT_FORMAT,
    "number": "#,##0",
    "date": DATE_FORMAT,
}


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = HEADER_BORDER


def format_data_cell(
    ws: Worksheet,
    row_num: int,
    col_num: int,
    value,
    col_type: str = "text",
    is_total: bool = False,
    highlight: str | None = None,
) -> None:
    """Write a value and style it by column type (text, currency, percent, number, date)."""
    if col_type == "date" and isinstance(value, str) and value:
        value = dt.date.fromisoformat(value[:10])

    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    cell.font = TOTAL_FONT if is_total else DATA_FONT
    cell.border = TOTAL_BORDER if is_total else THIN_BORDER
    cell.alignment = RIGHT if col_type in NUMERIC_TYPES else LEFT
    if col_type in _NUMBER_FORMATS:
        cell.number_format = _NUMBER_FORMATS[col_type]

    if highlight in HIGHLIGHT_FILLS:
        cell.fill = HIGHLIGHT_FILLS[highlight]
    elif is_total:
        cell.fill = TOTAL_FILL
    elif row_num % 2 == 0:
        cell.fill = ALTERNATE_FILL


def auto_column_width(ws: Worksheet, min_width: int = 10, max_width: int = 50) -> None:
    """Fit each column to its longest value."""
    for column in ws.columns:
        lengths = [len(str(cell.value)) for cell in column if cell.value is not None]
        width = min(max(max(lengths, default=0) + 2, min_width), max_width)
        ws.column_dimensions[get_column_letter(column[0].column)].width = width


def add_kpi_card(ws: Worksheet, row: int, col: int, value, label: str, format_type: str = "currency") -> None:
    """Large value with a small caption underneath."""
    value_cell = ws.cell(row=row, column=col)
    value_cell.value = value
    value_cell.font = KPI_VALUE_FONT
    value_cell.alignment = CENTER
    if format_type in _NUMBER_FORMATS:
        value_cell.number_format = _NUMBER_FORMATS[format_type]

    label_cell = ws.cell(row=row + 1, column=col)
    label_cell.value = label
    label_cell.font = KPI_LABEL_FONT
    label_cell.alignment = CENTER
