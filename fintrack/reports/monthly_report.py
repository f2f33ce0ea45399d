"""
Monthly report — six-month income vs. expenses plus the selected month's
running balance.

JSON-first: generate_json() produces canonical data, export_rows() and
generate_excel() render it.
"""
from __future__ import annotations

from fintrack.analytics.summary import monthly_summary
from fintrack.data.models import Transaction
from fintrack.data.schemas import MonthPeriod
from fintrack.excel.writer import ExcelWriter


def generate_json(transactions: list[Transaction], period: MonthPeriod) -> dict:
    summary = monthly_summary(transactions, period)
    return {
        "period": summary["period"],
        "summary": {
            "total_income": summary["total_income"],
            "total_expenses": summary["total_expenses"],
            "balance": summary["balance"],
            "transaction_count": summary["transaction_count"],
        },
        "trend": summary["monthly_trend"],
        "balance_history": summary["balance_history"],
    }


def export_rows(data: dict) -> list[dict]:
    """One CSV line per trend month: month, income, expenses, balance."""
    return [
        {
            "month": item["label"],
            "income": item["income"],
            "expenses": item["expenses"],
            "balance": item["balance"],
        }
        for item in data["trend"]
    ]


def _negative_balance(_, row: dict) -> str | None:
    return "expense" if row["balance"] < 0 else None


def _balance_sign(_, row: dict) -> str:
    return "income" if row["balance"] >= 0 else "expense"


def build_workbook(transactions: list[Transaction], period: MonthPeriod) -> ExcelWriter:
    """Resumo sheet (KPIs and the trend table) plus the running balance sheet."""
    data = generate_json(transactions, period)
    s = data["summary"]
    ew = ExcelWriter()

    ws = ew.add_sheet("Resumo")
    ew.write_title(ws, "RELATÓRIO MENSAL", data["period"]["label"])

    row = ew.write_section(ws, 4, "MÊS SELECIONADO")
    ew.write_kpi_row(ws, row, [
        (s["total_income"], "RECEITAS", "currency"),
        (s["total_expenses"], "DESPESAS", "currency"),
        (s["transaction_count"], "TRANSAÇÕES", "number"),
    ])
    ew.write_balance_kpi(ws, row, 7, s["balance"], "SALDO")
    row += 3

    row = ew.write_section(ws, row, "RECEITAS X DESPESAS")
    trend_cols = [
        ("label", "text", "Mês"),
        ("year", "text", "Ano"),
        ("income", "currency", "Receitas"),
        ("expenses", "currency", "Despesas"),
        ("balance", "currency", "Saldo"),
    ]
    ew.write_table(ws, row, trend_cols, data["trend"], highlight_fn=_negative_balance, freeze=False, show_total=True)

    ws = ew.add_sheet("Evolução do Saldo")
    history_cols = [
        ("date", "date", "Data"),
        ("balance", "currency", "Saldo acumulado"),
    ]
    ew.write_table(ws, 1, history_cols, data["balance_history"], highlight_fn=_balance_sign)
    return ew


def generate_excel(transactions: list[Transaction], period: MonthPeriod) -> bytes:
    return build_workbook(transactions, period).to_bytes()
