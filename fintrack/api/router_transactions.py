"""
Transaction endpoints: list, create, update, delete, export.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from fintrack.analytics.summary import month_transactions, newest_first
from fintrack.api.dependencies import get_store, parse_month
from fintrack.api.downloads import csv_download
from fintrack.api.response_models import MutationResponse
from fintrack.config import EXPORT_LABELS, MESSAGES
from fintrack.data.models import Transaction, TransactionPatch
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import TRANSACTIONS, FinanceStore

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _select(store: FinanceStore, period: MonthPeriod, all_months: bool) -> list[Transaction]:
    transactions = store.transactions if all_months else month_transactions(store.transactions, period)
    return newest_first(transactions)


@router.get("")
def list_transactions(
    all_months: bool = Query(False, alias="all"),
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    """Most recent first. Only the selected month unless ``all=true``."""
    return [t.to_json() for t in _select(store, period, all_months)]


@router.get("/export")
def export_transactions(
    all_months: bool = Query(True, alias="all"),
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    records = [t.to_json() for t in _select(store, period, all_months)]
    return csv_download(records, EXPORT_LABELS["transactions"])


@router.post("", response_model=MutationResponse, status_code=201)
def create_transaction(body: Transaction, store: FinanceStore = Depends(get_store)):
    record = store.add(TRANSACTIONS, body)
    return MutationResponse(message=MESSAGES["transaction_added"], record=record.to_json())


@router.put("/{transaction_id}", response_model=MutationResponse)
@router.patch("/{transaction_id}", response_model=MutationResponse)
def update_transaction(
    transaction_id: str,
    body: TransactionPatch,
    store: FinanceStore = Depends(get_store),
):
    record = store.update(TRANSACTIONS, transaction_id, body.changes())
    return MutationResponse(message=MESSAGES["transaction_updated"], record=record.to_json())


@router.delete("/{transaction_id}", response_model=MutationResponse)
def delete_transaction(transaction_id: str, store: FinanceStore = Depends(get_store)):
    store.delete(TRANSACTIONS, transaction_id)
    return MutationResponse(message=MESSAGES["transaction_deleted"])
