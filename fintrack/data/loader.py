"""
Spreadsheet CSV import: uploaded bytes -> transaction-shaped rows.

Headers are matched loosely (see ``normalize.locate_columns``) and every
field degrades to a default instead of failing, so one bad line never
blocks the rest of the file.
"""
from __future__ import annotations

import datetime as dt
import io
import logging
import time
from dataclasses import dataclass, field

import pandas as pd

from fintrack.config import IMPORT_ENCODINGS, LOCAL_TIMEZONE
from fintrack.data.models import SpreadsheetRow
from fintrack.data.normalize import (
    infer_type,
    locate_columns,
    normalize_category,
    normalize_payment_method,
    parse_amount,
    parse_date,
)
from fintrack.errors import ImportFailed

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    headers: list[str]
    columns: dict[str, int | None]
    rows: list[SpreadsheetRow] = field(default_factory=list)
    skipped: int = 0
    truncated: int = 0

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def nothing_imported(self) -> bool:
        return not self.rows


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def decode_upload(content: bytes) -> str:
    """Decode uploaded bytes, trying UTF-8 (with BOM) before Windows-1252."""
    for encoding in IMPORT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ImportFailed("O arquivo não é um texto CSV legível.")


def _scan(line: str, inside: bool = False) -> tuple[bool, int]:
    """Walk one physical line.

    Returns whether it ends inside a quoted field and how many separators
    it has outside quotes. A quote only opens a field at the field start;
    inside a field ``""`` is an escaped quote.
    """
    separators = 0
    at_field_start = not inside
    i = 0
    while i < len(line):
        char = line[i]
        if inside:
            if char == '"':
                if line[i + 1:i + 2] == '"':
                    i += 1
                else:
                    inside = False
        elif char == '"' and at_field_start:
            inside = True
        elif char == ",":
            separators += 1
            at_field_start = True
            i += 1
            continue
        at_field_start = False
        i += 1
    return inside, separators


@dataclass
class _Records:
    text: str
    damaged: list[int] = field(default_factory=list)
    truncated: list[int] = field(default_factory=list)


def _split_records(text: str) -> _Records:
    """Group physical lines into CSV records.

    A quoted field may span lines only if its quote closes later on. A line
    whose quote never closes is dropped on its own and reading resumes on
    the next line. Lines are numbered from 1 (the header).
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    records: list[str] = []
    result = _Records(text="")
    width = None

    start = 0
    while start < len(lines):
        end = start
        inside, separators = _scan(lines[start])
        while inside and end + 1 < len(lines):
            end += 1
            inside, more = _scan(lines[end], inside=True)
            separators += more

        if inside:
            if start == 0:
                raise ImportFailed("O cabeçalho do arquivo tem aspas sem fechamento.")
            result.damaged.append(start + 1)
            start += 1
            continue

        if width is None:
            width = separators + 1
        elif separators + 1 > width:
            result.truncated.append(start + 1)
        records.append("\n".join(lines[start:end + 1]))
        start = end + 1

    result.text = "\n".join(records)
    return result


def _read_frame(text: str) -> pd.DataFrame:
    """Read every cell as text. Longer lines lose their extra cells; short lines are padded."""
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            index_col=False,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise ImportFailed(f"O formato do arquivo não é compatível: {exc}") from exc
    return frame.fillna("")



# ---------------------------------------------------------------------------
# Normalising
# ---------------------------------------------------------------------------

def _cell(values: list[str], index: int | None) -> str:
    if index is None or index >= len(values):
        return ""
    return str(values[index]).strip()


def _line_list(numbers: list[int], limit: int = 10) -> str:
    shown = ", ".join(str(n) for n in numbers[:limit])
    return shown if len(numbers) <= limit else f"{shown} (+{len(numbers) - limit})"


def parse_rows(text: str, today: dt.date | None = None) -> ImportResult:
    """Parse CSV text (first line = headers) into new spreadsheet rows."""
    today = today or dt.datetime.now(LOCAL_TIMEZONE).date()
    records = _split_records(text)
    frame = _read_frame(records.text)
    headers = [str(h).strip() for h in frame.columns]
    columns = locate_columns(headers)
    result = ImportResult(
        headers=headers,
        columns=columns,
        skipped=len(records.damaged),
        truncated=len(records.truncated),
    )
    if records.damaged:
        logger.warning("Import: dropped line(s) %s with an unclosed quote", _line_list(records.damaged))
    if records.truncated:
        logger.warning("Import: extra cells ignored on line(s) %s", _line_list(records.truncated))

    stamp = int(time.time() * 1000)
    type_index = columns["type"]
    for line_no, values in enumerate(frame.itertuples(index=False, name=None), start=1):
        values = list(values)
        if not any(str(v).strip() for v in values):
            result.skipped += 1
            continue

        amount_raw = _cell(values, columns["amount"])
        type_raw = _cell(values, type_index) if type_index is not None else None
        result.rows.append(SpreadsheetRow(
            id=f"imported-{stamp}-{line_no}",
            date=parse_date(_cell(values, columns["date"]), today),
            description=_cell(values, columns["description"]),
            category=normalize_category(_cell(values, columns["category"])),
            payment_method=normalize_payment_method(_cell(values, columns["payment_method"])),
            amount=parse_amount(amount_raw),
            type=infer_type(type_raw, amount_raw),
            is_new=True,
        ))

    missing = [role for role, index in columns.items() if index is None]
    if missing:
        logger.info("Import: no column found for %s", ", ".join(missing))
    logger.info("Import: %d row(s) parsed from %d column(s)", result.count, len(headers))
    return result


def import_csv(content: bytes, today: dt.date | None = None) -> ImportResult:
    """Decode and parse an uploaded CSV file."""
    return parse_rows(decode_upload(content), today)
