"""
Dashboard endpoints — month summary, six-month trend, balance history,
expenses by category.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from fintrack.analytics.common import sanitize_for_json
from fintrack.analytics.summary import (
    balance_history,
    card_usage,
    category_breakdown,
    fixed_expense_total,
    month_transactions,
    monthly_summary,
    six_month_trend,
    split_by_type,
)
from fintrack.api.dependencies import get_store, parse_month
from fintrack.config import TREND_MONTHS
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import FinanceStore

router = APIRouter(prefix="/api", tags=["dashboard"])


def _safe_json(data) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


def _period_json(period: MonthPeriod) -> dict:
    return {"year": period.year, "month": period.month, "label": period.label, "key": period.key}


@router.get("/summary")
def summary(
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    """Totals, balance, categories, trend and history for the selected month."""
    data = monthly_summary(store.transactions, period)
    data["previous"] = _period_json(period.previous())
    data["next"] = _period_json(period.next())
    data["fixed_expenses_total"] = fixed_expense_total(store.fixed_expenses)
    data["cards"] = [card_usage(store.transactions, c, period) for c in store.credit_cards]
    return _safe_json(data)


@router.get("/trend")
def trend(
    months: int = Query(TREND_MONTHS, ge=1, le=24),
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    return _safe_json(six_month_trend(store.transactions, period, months))


@router.get("/balance-history")
def history(
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    return _safe_json(balance_history(store.transactions, period))


@router.get("/categories/breakdown")
def categories_breakdown(
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    _, expenses = split_by_type(month_transactions(store.transactions, period))
    return _safe_json(category_breakdown(expenses))


@router.get("/period")
def period_navigation(period: MonthPeriod = Depends(parse_month)):
    """The selected month with its neighbours, for month navigation."""
    return {
        "current": _period_json(period),
        "previous": _period_json(period.previous()),
        "next": _period_json(period.next()),
    }
