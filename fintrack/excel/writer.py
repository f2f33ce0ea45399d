"""
ExcelWriter — builds styled workbooks for the report downloads.
"""
from __future__ import annotations

import io
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fintrack.excel.formatters import (
    NUMERIC_TYPES,
    add_kpi_card,
    auto_column_width,
    format_data_cell,
    format_header_row,
)
from fintrack.excel.styles import (
    CENTER,
    CURRENCY_FORMAT,
    KPI_LABEL_FONT,
    NEGATIVE_KPI_FONT,
    POSITIVE_KPI_FONT,
    SECTION_FONT,
    SUBTITLE_FONT,
    TITLE_FONT,
)


ColSpec = tuple[str, str, str]  # (key, col_type, label)


class ExcelWriter:
    """Fluent builder for styled workbooks."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._first_sheet = True

    # ------------------------------------------------------------------
    # Sheets and headings
    # ------------------------------------------------------------------

    def add_sheet(self, title: str) -> Worksheet:
        """New worksheet; the first call renames the default sheet."""
        if self._first_sheet:
            ws = self.wb.active
            ws.title = title
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=title)
        return ws

    def write_title(self, ws: Worksheet, title: str, subtitle: str, merge_cols: int = 6) -> int:
        """Title and subtitle on rows 1-2. Returns the next free row."""
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)

        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)

        for col in range(1, merge_cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1).value = title
        ws.cell(row=row, column=1).font = SECTION_FONT
        return row + 2

    # ------------------------------------------------------------------
    # KPI cards
    # ------------------------------------------------------------------

    def write_kpi_row(
        self,
        ws: Worksheet,
        row: int,
        kpis: list[tuple],  # [(value, label, format_type), ...]
        start_col: int = 1,
        col_spacing: int = 2,
    ) -> int:
        col = start_col
        for value, label, fmt in kpis:
            add_kpi_card(ws, row, col, value, label, fmt)
            col += col_spacing
        return row + 3

    def write_balance_kpi(self, ws: Worksheet, row: int, col: int, value: float, label: str) -> None:
        """Money KPI shown green when >= 0 and red otherwise."""
        cell = ws.cell(row=row, column=col)
        cell.value = value
        cell.font = POSITIVE_KPI_FONT if value >= 0 else NEGATIVE_KPI_FONT
        cell.number_format = CURRENCY_FORMAT
        cell.alignment = CENTER

        caption = ws.cell(row=row + 1, column=col)
        caption.value = label
        caption.font = KPI_LABEL_FONT
        caption.alignment = CENTER

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        data: list[dict],
        highlight_fn=None,
        freeze: bool = True,
        show_total: bool = False,
        total_label: str = "TOTAL",
    ) -> int:
        """Header row plus one row per record. Returns the row after the table.

        highlight_fn(row_idx, row_data) -> "income" | "expense" | None
        """
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        rows = list(data)

        row = start_row + 1
        for idx, row_data in enumerate(rows):
            highlight = highlight_fn(idx, row_data) if highlight_fn else None
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                value = row_data.get(key)
                if value is None or (col_type in NUMERIC_TYPES and pd.isna(value)):
                    value = 0 if col_type in NUMERIC_TYPES else ""
                format_data_cell(ws, row, col_num, value, col_type, highlight=highlight)
            row += 1

        if show_total and rows:
            frame = pd.DataFrame(rows)
            format_data_cell(ws, row, 1, total_label, "text", is_total=True)
            for col_num, (key, col_type, _) in enumerate(columns[1:], 2):
                if col_type in ("currency", "number") and key in frame.columns:
                    format_data_cell(ws, row, col_num, float(frame[key].sum()), col_type, is_total=True)
                else:
                    format_data_cell(ws, row, col_num, "", "text", is_total=True)
            row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialise the workbook for an HTTP download."""
        buffer = io.BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
