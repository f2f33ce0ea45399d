"""
FastAPI dependencies — service singletons, current user, per-user stores,
month selection.
"""
from __future__ import annotations

import threading
from typing import Optional

from fastapi import Depends, Header, HTTPException, Query

from fintrack.auth import CurrentUser, IdentityService
from fintrack.data.repository import FinanceRepository
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import FinanceStore
from fintrack.errors import AuthError

# ---------------------------------------------------------------------------
# Service singletons (set during startup)
# ---------------------------------------------------------------------------
_repository: FinanceRepository | None = None
_identity: IdentityService | None = None


def set_services(repository: FinanceRepository, identity: IdentityService) -> None:
    global _repository, _identity
    _repository = repository
    _identity = identity
    _stores.clear()


def get_repository() -> FinanceRepository:
    if _repository is None:
        raise HTTPException(503, "Server not initialized yet")
    return _repository


def get_identity() -> IdentityService:
    if _identity is None:
        raise HTTPException(503, "Server not initialized yet")
    return _identity


# ---------------------------------------------------------------------------
# Current user from the bearer token
# ---------------------------------------------------------------------------

def get_access_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization:
        raise AuthError("Faça login para continuar")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Cabeçalho Authorization inválido")
    return token.strip()


def get_current_user(
    token: str = Depends(get_access_token),
    identity: IdentityService = Depends(get_identity),
) -> CurrentUser:
    return identity.verify(token)


# ---------------------------------------------------------------------------
# One store per signed-in user, loaded on first use
# ---------------------------------------------------------------------------
_stores: dict[str, FinanceStore] = {}
_stores_lock = threading.Lock()


def get_store(
    user: CurrentUser = Depends(get_current_user),
    repository: FinanceRepository = Depends(get_repository),
) -> FinanceStore:
    with _stores_lock:
        store = _stores.get(user.id)
        if store is None:
            store = FinanceStore(repository, user.id)
            _stores[user.id] = store
    return store.ensure_loaded()


def drop_store(user_id: str) -> None:
    with _stores_lock:
        _stores.pop(user_id, None)


# ---------------------------------------------------------------------------
# Month selection from query params
# ---------------------------------------------------------------------------

def parse_month(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=0, le=11, description="0 = January ... 11 = December"),
) -> MonthPeriod:
    """Selected month; missing values default to the current local month."""
    current = MonthPeriod.current()
    return MonthPeriod(
        year if year is not None else current.year,
        month if month is not None else current.month,
    )
