"""
Aggregation engine — monthly totals, category breakdown, card usage,
six-month trend and running balance history.

Every function is pure: it takes the full in-memory list of records plus
an explicit ``MonthPeriod`` and never touches storage or session state.
"""
from __future__ import annotations

import pandas as pd

from fintrack.analytics.common import pct_of_total
from fintrack.config import TREND_MONTHS
from fintrack.data.models import CreditCard, FixedExpense, Transaction
from fintrack.data.schemas import Category, MonthPeriod, PaymentMethod, TransactionType, local_date


# ---------------------------------------------------------------------------
# Frame helper
# ---------------------------------------------------------------------------

_FRAME_COLUMNS = ["id", "day", "type", "amount", "category", "payment_method", "credit_card_id"]


def transactions_frame(transactions: list[Transaction]) -> pd.DataFrame:
    """One row per transaction with local calendar fields and a signed amount."""
    frame = pd.DataFrame(
        [
            (
                t.id,
                local_date(t.date),
                t.type.value,
                float(t.amount),
                t.category.value,
                t.payment_method.value,
                t.credit_card_id,
            )
            for t in transactions
        ],
        columns=_FRAME_COLUMNS,
    )
    frame["year"] = [d.year for d in frame["day"]]
    frame["month"] = [d.month - 1 for d in frame["day"]]
    frame["signed"] = [
        amount if kind == TransactionType.INCOME.value else -amount
        for kind, amount in zip(frame["type"], frame["amount"])
    ]
    return frame


# ---------------------------------------------------------------------------
# Filtering & totals
# ---------------------------------------------------------------------------

def month_transactions(transactions: list[Transaction], period: MonthPeriod) -> list[Transaction]:
    """Transactions whose local calendar date falls inside ``period``."""
    return [t for t in transactions if period.contains(local_date(t.date))]


def split_by_type(transactions: list[Transaction]) -> tuple[list[Transaction], list[Transaction]]:
    """Return (income, expenses)."""
    income = [t for t in transactions if t.type == TransactionType.INCOME]
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]
    return income, expenses


def total(transactions: list[Transaction]) -> float:
    return sum((t.amount for t in transactions), 0.0)


def total_income(transactions: list[Transaction], period: MonthPeriod) -> float:
    income, _ = split_by_type(month_transactions(transactions, period))
    return total(income)


def total_expenses(transactions: list[Transaction], period: MonthPeriod) -> float:
    _, expenses = split_by_type(month_transactions(transactions, period))
    return total(expenses)


def monthly_balance(transactions: list[Transaction], period: MonthPeriod) -> float:
    return total_income(transactions, period) - total_expenses(transactions, period)


def newest_first(transactions: list[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: local_date(t.date), reverse=True)


# ---------------------------------------------------------------------------
# Category breakdown
# ---------------------------------------------------------------------------

def category_breakdown(expenses: list[Transaction]) -> list[dict]:
    """Expense totals per category, largest first.

    Ties keep the order in which categories were first seen. Percentages
    are 0 when there is nothing spent.
    """
    expenses = [t for t in expenses if t.type == TransactionType.EXPENSE]
    if not expenses:
        return []

    frame = transactions_frame(expenses)
    grouped = frame.groupby("category", sort=False)["amount"].sum()
    grouped = grouped.sort_values(ascending=False, kind="stable")
    overall = float(grouped.sum())

    return [
        {
            "category": category,
            "label": Category(category).label,
            "amount": float(amount),
            "percentage": pct_of_total(float(amount), overall),
        }
        for category, amount in grouped.items()
    ]


# ---------------------------------------------------------------------------
# Credit cards
# ---------------------------------------------------------------------------

def card_spend(transactions: list[Transaction], card_id: str, period: MonthPeriod) -> float:
    """Credit expenses charged to ``card_id`` during ``period``."""
    return total([
        t for t in month_transactions(transactions, period)
        if t.type == TransactionType.EXPENSE
        and t.payment_method == PaymentMethod.CREDIT
        and t.credit_card_id == card_id
    ])


def card_usage_percentage(used: float, limit: float) -> float:
    """Share of the limit used. Uncapped; 0 when the limit is 0."""
    return pct_of_total(used, limit)


def card_usage(transactions: list[Transaction], card: CreditCard, period: MonthPeriod) -> dict:
    used = card_spend(transactions, card.id, period)
    return {
        "card_id": card.id,
        "name": card.name,
        "bank": card.bank,
        "used": used,
        "limit": card.limit,
        "available": card.limit - used,
        "percentage": card_usage_percentage(used, card.limit),
        "due_day": card.due_day,
        "closing_day": card.closing_day,
    }


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

def six_month_trend(
    transactions: list[Transaction],
    period: MonthPeriod,
    months: int = TREND_MONTHS,
) -> list[dict]:
    """Income/expenses/balance for the months ending at ``period``, oldest first."""
    frame = transactions_frame(transactions)
    is_income = frame["type"] == TransactionType.INCOME.value

    rows = []
    for p in period.trailing(months):
        in_month = (frame["year"] == p.year) & (frame["month"] == p.month)
        income = float(frame.loc[in_month & is_income, "amount"].sum())
        expenses = float(frame.loc[in_month & ~is_income, "amount"].sum())
        rows.append({
            "month": p.key,
            "label": p.short_label,
            "year": p.year,
            "month_index": p.month,
            "income": income,
            "expenses": expenses,
            "balance": income - expenses,
        })
    return rows


def balance_history(transactions: list[Transaction], period: MonthPeriod) -> list[dict]:
    """Running balance inside ``period``, one point per day with activity."""
    monthly = month_transactions(transactions, period)
    if not monthly:
        return []

    frame = transactions_frame(monthly)
    daily = frame.groupby("day")["signed"].sum().sort_index()
    running = daily.cumsum()
    return [
        {"date": day.isoformat(), "label": day.strftime("%d/%m"), "balance": float(balance)}
        for day, balance in running.items()
    ]


# ---------------------------------------------------------------------------
# Fixed expenses
# ---------------------------------------------------------------------------

def fixed_expense_total(fixed_expenses: list[FixedExpense]) -> float:
    return sum((e.amount for e in fixed_expenses), 0.0)


def fixed_expense_schedule(
    fixed_expenses: list[FixedExpense],
    cards: list[CreditCard] | None = None,
) -> list[dict]:
    """Recurring obligations ordered by day of month, with card names resolved."""
    card_names = {c.id: c.name for c in cards or []}
    rows = []
    for expense in sorted(fixed_expenses, key=lambda e: e.day_of_month):
        rows.append({
            "id": expense.id,
            "description": expense.description,
            "amount": expense.amount,
            "day_of_month": expense.day_of_month,
            "category": expense.category.value,
            "category_label": expense.category.label,
            "payment_method": expense.payment_method.value,
            "payment_method_label": expense.payment_method.label,
            "card_name": card_names.get(expense.credit_card_id, "Cartão") if expense.credit_card_id else None,
            "notes": expense.notes,
        })
    return rows


# ---------------------------------------------------------------------------
# Everything the dashboard shows for one month
# ---------------------------------------------------------------------------

def monthly_summary(transactions: list[Transaction], period: MonthPeriod) -> dict:
    monthly = month_transactions(transactions, period)
    income, expenses = split_by_type(monthly)
    income_total = total(income)
    expense_total = total(expenses)
    return {
        "period": {"year": period.year, "month": period.month, "label": period.label, "key": period.key},
        "total_income": income_total,
        "total_expenses": expense_total,
        "balance": income_total - expense_total,
        "transaction_count": len(monthly),
        "expenses_by_category": category_breakdown(expenses),
        "monthly_trend": six_month_trend(transactions, period),
        "balance_history": balance_history(transactions, period),
    }
