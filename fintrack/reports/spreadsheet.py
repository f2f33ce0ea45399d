"""
Spreadsheet view — the selected month's transactions as editable rows.

Rows are plain ``SpreadsheetRow`` values held by the client; only rows
flagged ``is_new`` or ``is_modified`` are sent back for saving.
"""
from __future__ import annotations

import calendar
import datetime as dt
import time

from fintrack.analytics.summary import month_transactions
from fintrack.config import LOCAL_TIMEZONE
from fintrack.data.models import SpreadsheetRow, Transaction
from fintrack.data.schemas import Category, MonthPeriod, PaymentMethod, TransactionType


def period_rows(transactions: list[Transaction], period: MonthPeriod) -> list[SpreadsheetRow]:
    return [SpreadsheetRow.from_transaction(t) for t in month_transactions(transactions, period)]


def blank_row(period: MonthPeriod, today: dt.date | None = None) -> SpreadsheetRow:
    """A new, empty expense row dated today's day-of-month inside ``period``."""
    today = today or dt.datetime.now(LOCAL_TIMEZONE).date()
    last_day = calendar.monthrange(period.year, period.month + 1)[1]
    return SpreadsheetRow(
        id=f"new-{int(time.time() * 1000)}",
        date=dt.date(period.year, period.month + 1, min(today.day, last_day)),
        description="",
        category=Category.OUTROS,
        payment_method=PaymentMethod.MONEY,
        amount=0.0,
        type=TransactionType.EXPENSE,
        is_new=True,
    )


def pending_rows(rows: list[SpreadsheetRow]) -> list[SpreadsheetRow]:
    return [r for r in rows if r.is_new or r.is_modified]


def export_rows(rows: list[SpreadsheetRow]) -> list[dict]:
    return [r.to_json() for r in rows]
