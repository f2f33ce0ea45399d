"""
Fixed (recurring monthly) expense endpoints.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from fintrack.analytics.summary import fixed_expense_schedule, fixed_expense_total
from fintrack.api.dependencies import get_store
from fintrack.api.downloads import csv_download
from fintrack.api.response_models import FixedExpensesResponse, MutationResponse
from fintrack.config import EXPORT_LABELS, MESSAGES
from fintrack.data.models import FixedExpense, FixedExpensePatch
from fintrack.data.store import FIXED_EXPENSES, FinanceStore

router = APIRouter(prefix="/api/fixed-expenses", tags=["fixed-expenses"])


@router.get("", response_model=FixedExpensesResponse)
def list_fixed_expenses(store: FinanceStore = Depends(get_store)):
    """Ordered by day of month, with the paying card's name."""
    fixed = store.fixed_expenses
    return FixedExpensesResponse(
        total=fixed_expense_total(fixed),
        count=len(fixed),
        items=fixed_expense_schedule(fixed, store.credit_cards),
    )


@router.get("/export")
def export_fixed_expenses(store: FinanceStore = Depends(get_store)):
    records = [e.to_json() for e in sorted(store.fixed_expenses, key=lambda e: e.day_of_month)]
    return csv_download(records, EXPORT_LABELS["fixed_expenses"])


@router.post("", response_model=MutationResponse, status_code=201)
def create_fixed_expense(body: FixedExpense, store: FinanceStore = Depends(get_store)):
    record = store.add(FIXED_EXPENSES, body)
    return MutationResponse(message=MESSAGES["fixed_added"], record=record.to_json())


@router.put("/{expense_id}", response_model=MutationResponse)
@router.patch("/{expense_id}", response_model=MutationResponse)
def update_fixed_expense(expense_id: str, body: FixedExpensePatch, store: FinanceStore = Depends(get_store)):
    record = store.update(FIXED_EXPENSES, expense_id, body.changes())
    return MutationResponse(message=MESSAGES["fixed_updated"], record=record.to_json())


@router.delete("/{expense_id}", response_model=MutationResponse)
def delete_fixed_expense(expense_id: str, store: FinanceStore = Depends(get_store)):
    store.delete(FIXED_EXPENSES, expense_id)
    return MutationResponse(message=MESSAGES["fixed_deleted"])
