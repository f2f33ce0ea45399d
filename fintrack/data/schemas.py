"""
Closed vocabularies and the month period used by every monthly view.
"""
from __future__ import annotations

import datetime as dt
import unicodedata
from dataclasses import dataclass
from enum import Enum

from fintrack.config import (
    CATEGORY_LABELS,
    LOCAL_TIMEZONE,
    MONTH_ABBREVIATIONS,
    MONTH_NAMES,
    PAYMENT_METHOD_LABELS,
)


def fold(text: str) -> str:
    """Lower-case, trim and strip accents ("Cartão " -> "cartao")."""
    decomposed = unicodedata.normalize("NFKD", str(text))
    return "".join(c for c in decomposed if not unicodedata.combining(c)).strip().lower()


def local_date(value: dt.datetime | dt.date) -> dt.date:
    """Calendar day of a timestamp in the configured local timezone.

    Naive timestamps are taken as already local.
    """
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(LOCAL_TIMEZONE)
        return value.date()
    return value


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    MONEY = "money"
    DEBIT = "debit"
    CREDIT = "credit"
    PIX = "pix"
    TRANSFER = "transfer"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self.value]


class Category(str, Enum):
    """Category tags. Anything outside the vocabulary resolves to OUTROS."""

    ALIMENTACAO = "alimentacao"
    TRANSPORTE = "transporte"
    MORADIA = "moradia"
    ALUGUEL = "aluguel"
    CONDOMINIO = "condominio"
    AGUA = "agua"
    LUZ = "luz"
    INTERNET = "internet"
    TELEFONE = "telefone"
    TV = "tv"
    ACADEMIA = "academia"
    PLANO_SAUDE = "plano_saude"
    SEGURO = "seguro"
    FINANCIAMENTO = "financiamento"
    LAZER = "lazer"
    SAUDE = "saude"
    EDUCACAO = "educacao"
    VESTUARIO = "vestuario"
    ASSINATURAS = "assinaturas"
    OUTROS_GASTOS = "outros_gastos"
    SALARIO = "salario"
    ADIANTAMENTO = "adiantamento"
    BONUS = "bonus"
    INVESTIMENTOS = "investimentos"
    VENDAS = "vendas"
    ALUGUEL_RECEBIDO = "aluguel_recebido"
    FREELANCE = "freelance"
    OUTRAS_RECEITAS = "outras_receitas"
    OUTROS = "outros"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            folded = fold(value)
            for member in cls:
                if member.value == folded:
                    return member
        return cls.OUTROS

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.value]


@dataclass(frozen=True)
class MonthPeriod:
    """One calendar month. ``month`` is 0-based (January = 0)."""

    year: int
    month: int  # 0-11

    def __post_init__(self) -> None:
        if not 0 <= self.month <= 11:
            raise ValueError(f"month must be between 0 and 11, got {self.month}")

    @classmethod
    def current(cls, today: dt.date | None = None) -> "MonthPeriod":
        today = today or dt.datetime.now(LOCAL_TIMEZONE).date()
        return cls(today.year, today.month - 1)

    @classmethod
    def of(cls, day: dt.date) -> "MonthPeriod":
        return cls(day.year, day.month - 1)

    def shift(self, months: int) -> "MonthPeriod":
        """Step forwards (positive) or backwards (negative), wrapping years."""
        index = self.year * 12 + self.month + months
        return MonthPeriod(index // 12, index % 12)

    def previous(self) -> "MonthPeriod":
        return self.shift(-1)

    def next(self) -> "MonthPeriod":
        return self.shift(1)

    def trailing(self, count: int) -> list["MonthPeriod"]:
        """The ``count`` months ending at this one, oldest first."""
        return [self.shift(-offset) for offset in range(count - 1, -1, -1)]

    def contains(self, day: dt.date) -> bool:
        return day.year == self.year and day.month - 1 == self.month

    @property
    def start(self) -> dt.date:
        return dt.date(self.year, self.month + 1, 1)

    @property
    def end(self) -> dt.date:
        return self.next().start - dt.timedelta(days=1)

    @property
    def label(self) -> str:
        """Human-readable label, e.g. "Março 2024"."""
        return f"{MONTH_NAMES[self.month]} {self.year}"

    @property
    def short_label(self) -> str:
        return MONTH_ABBREVIATIONS[self.month]

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month + 1:02d}"
