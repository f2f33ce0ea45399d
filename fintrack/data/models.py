"""
Typed records: transactions, credit cards, fixed expenses, user profiles.

Field names are snake_case in Python and camelCase on the wire
(``paymentMethod``, ``creditCardId`` ...). Both spellings are accepted.
"""
from __future__ import annotations

import datetime as dt
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from fintrack.config import DEFAULT_PLAN
from fintrack.data.schemas import Category, PaymentMethod, TransactionType, local_date


class Record(BaseModel):
    """Common shape of a stored record. ``id`` is None until persisted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def to_document(self) -> dict[str, Any]:
        """Storage payload: snake_case keys, JSON-safe values, no id."""
        return self.model_dump(mode="json", exclude={"id"})

    def to_json(self) -> dict[str, Any]:
        """API/export payload: camelCase keys, JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)

    def merged(self, changes: dict[str, Any]):
        """Return a new, re-validated record with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        data["id"] = self.id
        data["created_at"] = self.created_at
        return type(self).model_validate(data)


def _card_rule(payment_method: PaymentMethod, credit_card_id: Optional[str]) -> Optional[str]:
    """A card reference is required for credit and dropped for anything else."""
    if payment_method == PaymentMethod.CREDIT:
        if not credit_card_id:
            raise ValueError("creditCardId is required when paymentMethod is credit")
        return credit_card_id
    return None


class Transaction(Record):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: dt.datetime
    category: Category = Category.OUTROS
    notes: str = ""
    type: TransactionType
    payment_method: PaymentMethod = PaymentMethod.MONEY
    credit_card_id: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_datetime(cls, value):
        if isinstance(value, str) and len(value.strip()) == 10:
            value = dt.date.fromisoformat(value.strip())
        if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
            return dt.datetime.combine(value, dt.time())
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        return Category(value) if value is not None else Category.OUTROS

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value):
        return value or ""

    @model_validator(mode="after")
    def _check_card(self) -> "Transaction":
        self.credit_card_id = _card_rule(self.payment_method, self.credit_card_id)
        return self


class CreditCard(Record):
    name: str = Field(..., min_length=1)
    bank: str = Field(..., min_length=1)
    limit: float = Field(..., gt=0)
    due_day: int = Field(..., ge=1, le=31)
    closing_day: int = Field(..., ge=1, le=31)


class FixedExpense(Record):
    """A recurring monthly obligation. Never materialised into transactions."""

    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    category: Category = Category.OUTROS
    payment_method: PaymentMethod = PaymentMethod.MONEY
    day_of_month: int = Field(..., ge=1, le=31)
    notes: str = ""
    credit_card_id: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        return Category(value) if value is not None else Category.OUTROS

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value):
        return value or ""

    @model_validator(mode="after")
    def _check_card(self) -> "FixedExpense":
        self.credit_card_id = _card_rule(self.payment_method, self.credit_card_id)
        return self


class UserProfile(Record):
    email: Optional[str] = None
    name: Optional[str] = None
    photo_url: Optional[str] = None
    plan: str = DEFAULT_PLAN

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id", "updated_at"})


# ---------------------------------------------------------------------------
# Partial updates: only the fields a client sends are merged
# ---------------------------------------------------------------------------

class _Patch(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class TransactionPatch(_Patch):
    description: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[Union[dt.datetime, dt.date]] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    type: Optional[TransactionType] = None
    payment_method: Optional[PaymentMethod] = None
    credit_card_id: Optional[str] = None


class CreditCardPatch(_Patch):
    name: Optional[str] = None
    bank: Optional[str] = None
    limit: Optional[float] = None
    due_day: Optional[int] = None
    closing_day: Optional[int] = None


class FixedExpensePatch(_Patch):
    description: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    day_of_month: Optional[int] = None
    notes: Optional[str] = None
    credit_card_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Spreadsheet rows: editable, possibly not yet persisted
# ---------------------------------------------------------------------------

class SpreadsheetRow(BaseModel):
    """One line of the spreadsheet view or of an imported CSV.

    Imported rows get a temporary ``imported-...`` id and ``is_new=True``;
    they only become Transactions once saved.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    date: dt.date
    description: str = ""
    category: Category = Category.OUTROS
    payment_method: PaymentMethod = PaymentMethod.MONEY
    credit_card_id: Optional[str] = None
    amount: float = Field(0.0, ge=0)
    type: TransactionType = TransactionType.EXPENSE
    is_new: bool = False
    is_modified: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, value):
        return Category(value) if value is not None else Category.OUTROS

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "SpreadsheetRow":
        return cls(
            id=transaction.id,
            date=local_date(transaction.date),
            description=transaction.description,
            category=transaction.category,
            payment_method=transaction.payment_method,
            credit_card_id=transaction.credit_card_id,
            amount=transaction.amount,
            type=transaction.type,
        )

    def to_transaction(self) -> Transaction:
        """Validate the row as a transaction (raises pydantic ValidationError)."""
        return Transaction(
            id=None if self.is_new else self.id,
            description=self.description,
            amount=self.amount,
            date=self.date,
            category=self.category,
            type=self.type,
            payment_method=self.payment_method,
            credit_card_id=self.credit_card_id if self.payment_method == PaymentMethod.CREDIT else None,
            notes="",
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
