"""
Meta endpoints: health, vocabularies, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from fintrack import __version__
from fintrack.api.dependencies import get_store
from fintrack.api.response_models import HealthResponse, RefreshResponse, VocabularyResponse
from fintrack.config import LOCAL_TIMEZONE, MONTH_NAMES
from fintrack.data.schemas import Category, PaymentMethod, TransactionType
from fintrack.data.store import FinanceStore

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", version=__version__, timezone=str(LOCAL_TIMEZONE))


@router.get("/meta/vocabulary", response_model=VocabularyResponse)
def vocabulary():
    """Category, payment-method and type tags with their display names."""
    return VocabularyResponse(
        categories=[{"value": c.value, "label": c.label} for c in Category],
        payment_methods=[{"value": m.value, "label": m.label} for m in PaymentMethod],
        transaction_types=[t.value for t in TransactionType],
        months=MONTH_NAMES,
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh(store: FinanceStore = Depends(get_store)):
    """Re-fetch the signed-in user's records from storage."""
    store.refresh()
    return RefreshResponse(
        transactions=len(store.transactions),
        credit_cards=len(store.credit_cards),
        fixed_expenses=len(store.fixed_expenses),
    )
