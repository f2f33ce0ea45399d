"""
File download responses for CSV and Excel exports.
"""
from __future__ import annotations

from typing import Any, Iterable

from fastapi.responses import Response

from fintrack.data.export import export_filename, to_csv_text

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def csv_download(records: Iterable[dict[str, Any]], label: str) -> Response:
    text = to_csv_text(records)
    return Response(
        content=text,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename(label)),
    )


def xlsx_download(content: bytes, label: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(export_filename(label, extension="xlsx")),
    )
