"""
Credit card endpoints: CRUD plus monthly usage against the limit.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from fintrack.analytics.common import sanitize_for_json
from fintrack.analytics.summary import card_usage
from fintrack.api.dependencies import get_store, parse_month
from fintrack.api.response_models import MutationResponse
from fintrack.config import MESSAGES
from fintrack.data.models import CreditCard, CreditCardPatch
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import CREDIT_CARDS, FinanceStore

router = APIRouter(prefix="/api/cards", tags=["cards"])


@router.get("")
def list_cards(store: FinanceStore = Depends(get_store)):
    return [c.to_json() for c in store.credit_cards]


@router.get("/usage")
def cards_usage(
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    """Spend charged to every card in the selected month."""
    transactions = store.transactions
    return sanitize_for_json([card_usage(transactions, c, period) for c in store.credit_cards])


@router.get("/{card_id}/usage")
def card_usage_detail(
    card_id: str,
    period: MonthPeriod = Depends(parse_month),
    store: FinanceStore = Depends(get_store),
):
    return sanitize_for_json(card_usage(store.transactions, store.card(card_id), period))


@router.post("", response_model=MutationResponse, status_code=201)
def create_card(body: CreditCard, store: FinanceStore = Depends(get_store)):
    record = store.add(CREDIT_CARDS, body)
    return MutationResponse(message=MESSAGES["card_added"], record=record.to_json())


@router.put("/{card_id}", response_model=MutationResponse)
@router.patch("/{card_id}", response_model=MutationResponse)
def update_card(card_id: str, body: CreditCardPatch, store: FinanceStore = Depends(get_store)):
    record = store.update(CREDIT_CARDS, card_id, body.changes())
    return MutationResponse(message=MESSAGES["card_updated"], record=record.to_json())


@router.delete("/{card_id}", response_model=MutationResponse)
def delete_card(card_id: str, store: FinanceStore = Depends(get_store)):
    store.delete(CREDIT_CARDS, card_id)
    return MutationResponse(message=MESSAGES["card_deleted"])
