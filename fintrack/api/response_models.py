"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from fintrack.data.models import SpreadsheetRow


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class AuthResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    confirmed: bool


class OAuthStartResponse(BaseModel):
    provider: str
    url: str
    flow_id: str


class MeResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    profile: Optional[dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class MutationResponse(BaseModel):
    message: str
    record: Optional[dict[str, Any]] = None


class FixedExpensesResponse(BaseModel):
    total: float
    count: int
    items: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Spreadsheet
# ---------------------------------------------------------------------------

class ImportResponse(BaseModel):
    message: str
    count: int
    skipped: int
    truncated: int = 0
    columns: dict[str, Optional[int]]
    rows: list[dict[str, Any]]


class SaveRowsRequest(BaseModel):
    rows: list[SpreadsheetRow]


class SaveRowsResponse(BaseModel):
    message: str
    saved: int
    records: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
    version: str
    timezone: str


class VocabularyResponse(BaseModel):
    categories: list[dict[str, str]]
    payment_methods: list[dict[str, str]]
    transaction_types: list[str]
    months: list[str]


class RefreshResponse(BaseModel):
    transactions: int
    credit_cards: int
    fixed_expenses: int
