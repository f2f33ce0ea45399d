"""
Header-role detection and field normalisation for spreadsheet imports.
"""
from __future__ import annotations

import datetime as dt
import re

import pandas as pd

from fintrack.config import (
    CATEGORY_TOKENS,
    HEADER_TOKENS,
    INCOME_TOKENS,
    LOCAL_TIMEZONE,
    PAYMENT_METHOD_TOKENS,
)
from fintrack.data.schemas import Category, PaymentMethod, TransactionType, fold


# ---------------------------------------------------------------------------
# Header roles
# ---------------------------------------------------------------------------

def locate_columns(headers: list[str]) -> dict[str, int | None]:
    """Map each role (date, description, ...) to a column index or None.

    An exact header match wins; otherwise the first header containing
    one of the role's tokens is used.
    """
    folded = [fold(h) for h in headers]
    roles: dict[str, int | None] = {}
    for role, tokens in HEADER_TOKENS.items():
        index = next((i for i, h in enumerate(folded) if h in tokens), None)
        if index is None:
            index = next((i for i, h in enumerate(folded) if any(t in h for t in tokens)), None)
        roles[role] = index
    return roles


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def parse_date(raw: str, today: dt.date) -> dt.date:
    """Read ``d/m/y`` (a trailing time is ignored) or any format pandas
    understands; fall back to ``today``."""
    raw = (raw or "").strip()
    if not raw:
        return today

    if "/" in raw:
        parts = raw.split("/")
        if len(parts) != 3:
            return today
        numbers = [_LEADING_INT_RE.match(p) for p in parts]
        if not all(numbers):
            return today
        try:
            day, month, year = (int(m.group(1)) for m in numbers)
            if year < 100:
                year += 2000
            return dt.date(year, month, day)
        except ValueError:
            return today

    parsed = pd.to_datetime(raw, errors="coerce")
    if pd.isna(parsed):
        return today
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(LOCAL_TIMEZONE)
    return parsed.date()


# ---------------------------------------------------------------------------
# Payment method / type / amount / category
# ---------------------------------------------------------------------------

def normalize_payment_method(raw: str) -> PaymentMethod:
    """Map free-form payment text ("Cartão de Crédito", "PIX") to a method."""
    value = fold(raw or "")
    for tokens, method in PAYMENT_METHOD_TOKENS:
        if any(t in value for t in tokens):
            return PaymentMethod(method)
    return PaymentMethod.MONEY


def infer_type(type_raw: str | None, amount_raw: str) -> TransactionType:
    """Transaction type from the type column, or from the amount's sign.

    Without a type column only an explicit leading "-" means expense;
    unsigned and "+" amounts are read as income.
    """
    if type_raw is not None:
        value = fold(type_raw)
        if any(t in value for t in INCOME_TOKENS):
            return TransactionType.INCOME
        return TransactionType.EXPENSE

    amount = (amount_raw or "").strip() or "0"
    if amount.startswith("+"):
        return TransactionType.INCOME
    if not amount.startswith("-"):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


_AMOUNT_JUNK_RE = re.compile(r"[^\d.,+\-]")
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: str) -> float:
    """Parse "R$ -1.234,56" style amounts. Unparseable -> 0. Always >= 0."""
    cleaned = _AMOUNT_JUNK_RE.sub("", raw or "")
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")

    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return 0.0
    return abs(float(match.group()))


def normalize_category(raw: str) -> Category:
    """Map free-form category text to a tag; unknown -> ``outros``."""
    value = fold(raw or "")
    if not value:
        return Category.OUTROS
    if value in {c.value for c in Category}:
        return Category(value)
    for tokens, tag in CATEGORY_TOKENS:
        if any(t in value for t in tokens):
            return Category(tag)
    return Category.OUTROS
