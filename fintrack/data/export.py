"""
CSV export of uniformly-shaped records.
"""
from __future__ import annotations

import csv
import datetime as dt
from typing import Any, Iterable

import pandas as pd

from fintrack.config import LOCAL_TIMEZONE, MESSAGES
from fintrack.errors import NothingToExport


def to_csv_text(records: Iterable[dict[str, Any]]) -> str:
    """Serialise records to CSV; columns come from the first record's keys.

    None becomes an empty cell; cells containing a comma, quote or newline
    are quoted with inner quotes doubled.
    """
    records = list(records)
    if not records:
        raise NothingToExport(MESSAGES["nothing_to_export"])

    headers = list(records[0].keys())
    frame = pd.DataFrame(records, columns=headers, dtype=object)
    return frame.to_csv(
        index=False,
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
        na_rep="",
    )


def export_filename(label: str, today: dt.date | None = None, extension: str = "csv") -> str:
    """``<label>_<YYYY-MM-DD>.<extension>``."""
    today = today or dt.datetime.now(LOCAL_TIMEZONE).date()
    return f"{label}_{today.isoformat()}.{extension}"
