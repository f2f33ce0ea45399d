"""
FinanceStore — one user's records mirrored in memory.

Loaded once per session with ``refresh()``, read on every request.
Mutations are two-phase: the new record is built and validated first,
the remote call runs next, and local state changes only after the
remote call succeeds. A failed call leaves the mirror untouched.
"""
from __future__ import annotations

import datetime as dt
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from pydantic import ValidationError

from fintrack.config import CREDIT_CARDS_TABLE, FIXED_EXPENSES_TABLE, LOCAL_TIMEZONE, TRANSACTIONS_TABLE
from fintrack.data.models import CreditCard, FixedExpense, Record, SpreadsheetRow, Transaction
from fintrack.data.repository import FinanceRepository
from fintrack.errors import NotFound

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

TRANSACTIONS = "transactions"
CREDIT_CARDS = "credit_cards"
FIXED_EXPENSES = "fixed_expenses"

# Fields a spreadsheet row can change on an existing transaction
_ROW_FIELDS = {"description", "amount", "date", "category", "type", "payment_method", "credit_card_id"}


@dataclass
class _Collection:
    table: str
    model: type[Record]
    records: list = field(default_factory=list)


class FinanceStore:
    """In-memory transactions, credit cards and fixed expenses for one user."""

    def __init__(self, repository: FinanceRepository, user_id: str) -> None:
        self.repository = repository
        self.user_id = user_id
        self._collections = {
            TRANSACTIONS: _Collection(TRANSACTIONS_TABLE, Transaction),
            CREDIT_CARDS: _Collection(CREDIT_CARDS_TABLE, CreditCard),
            FIXED_EXPENSES: _Collection(FIXED_EXPENSES_TABLE, FixedExpense),
        }
        self._lock = threading.RLock()
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def refresh(self) -> "FinanceStore":
        """Fetch all three collections. Nothing is replaced unless every fetch succeeds."""
        fetched = {
            name: self._parse(collection, self.repository.fetch_all(collection.table, self.user_id))
            for name, collection in self._collections.items()
        }
        with self._lock:
            for name, records in fetched.items():
                self._collections[name].records = records
            self._loaded = True
        logger.info(
            "Loaded user %s: %d transactions, %d cards, %d fixed expenses",
            self.user_id,
            len(fetched[TRANSACTIONS]),
            len(fetched[CREDIT_CARDS]),
            len(fetched[FIXED_EXPENSES]),
        )
        return self

    def ensure_loaded(self) -> "FinanceStore":
        if not self._loaded:
            self.refresh()
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _parse(self, collection: _Collection, documents: list[dict]) -> list[Record]:
        records = []
        for doc in documents:
            try:
                records.append(collection.model.model_validate({**doc, "id": str(doc.get("id"))}))
            except ValidationError as exc:
                logger.warning("Skipping invalid %s row %s: %s", collection.table, doc.get("id"), exc)
        return records

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._collections[TRANSACTIONS].records)

    @property
    def credit_cards(self) -> list[CreditCard]:
        return list(self._collections[CREDIT_CARDS].records)

    @property
    def fixed_expenses(self) -> list[FixedExpense]:
        return list(self._collections[FIXED_EXPENSES].records)

    def find(self, kind: str, record_id: str) -> Record:
        for record in self._collections[kind].records:
            if record.id == record_id:
                return record
        raise NotFound(f"Registro {record_id} não encontrado")

    def card(self, card_id: str) -> CreditCard:
        return self.find(CREDIT_CARDS, card_id)

    # ------------------------------------------------------------------
    # Two-phase mutations
    # ------------------------------------------------------------------

    def _commit(self, remote: Callable[[], object], apply: Callable[[object], None]):
        """Run the remote call; apply the staged change only if it returned."""
        with self._lock:
            result = remote()
            apply(result)
            return result

    def add(self, kind: str, record: R) -> R:
        collection = self._collections[kind]
        staged = record.model_copy(update={"id": None, "created_at": _now()})
        document = staged.to_document()
        document.pop("updated_at", None)

        new_id = self._commit(
            lambda: self.repository.add(collection.table, self.user_id, document),
            lambda assigned: collection.records.append(staged.model_copy(update={"id": assigned})),
        )
        logger.info("Added %s/%s", collection.table, new_id)
        return self.find(kind, new_id)

    def update(self, kind: str, record_id: str, changes: dict) -> Record:
        """Merge ``changes`` (snake_case fields) into a record and persist it."""
        collection = self._collections[kind]
        current = self.find(kind, record_id)
        staged = current.merged({**changes, "updated_at": _now()})
        document = staged.to_document()
        document.pop("created_at", None)

        def apply(_):
            index = next(i for i, r in enumerate(collection.records) if r.id == record_id)
            collection.records[index] = staged

        self._commit(
            lambda: self.repository.update(collection.table, self.user_id, record_id, document),
            apply,
        )
        logger.info("Updated %s/%s", collection.table, record_id)
        return staged

    def delete(self, kind: str, record_id: str) -> None:
        collection = self._collections[kind]
        self.find(kind, record_id)

        def apply(_):
            collection.records = [r for r in collection.records if r.id != record_id]

        self._commit(
            lambda: self.repository.delete(collection.table, self.user_id, record_id),
            apply,
        )
        logger.info("Deleted %s/%s", collection.table, record_id)

    # ------------------------------------------------------------------
    # Spreadsheet batch save
    # ------------------------------------------------------------------

    def save_rows(self, rows: list[SpreadsheetRow]) -> list[Transaction]:
        """Persist new rows as transactions and modified rows as updates.

        Every pending row is validated before the first remote call. Rows
        are then saved one by one; a remote failure stops the batch and
        the rows already saved stay saved.
        """
        pending = [r for r in rows if r.is_new or r.is_modified]
        staged = [(row, row.to_transaction()) for row in pending]

        saved = []
        for row, transaction in staged:
            if row.is_new:
                saved.append(self.add(TRANSACTIONS, transaction))
            else:
                changes = transaction.model_dump(include=_ROW_FIELDS)
                saved.append(self.update(TRANSACTIONS, row.id, changes))
        logger.info("Spreadsheet save: %d of %d row(s) persisted", len(saved), len(rows))
        return saved


def _now() -> dt.datetime:
    return dt.datetime.now(LOCAL_TIMEZONE)
