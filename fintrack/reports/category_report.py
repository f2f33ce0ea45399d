"""
Category report — where the selected month's money went, largest first.
"""
from __future__ import annotations

from fintrack.analytics.summary import category_breakdown, month_transactions, split_by_type
from fintrack.data.models import Transaction
from fintrack.data.schemas import MonthPeriod
from fintrack.excel.writer import ExcelWriter


def generate_json(transactions: list[Transaction], period: MonthPeriod) -> dict:
    _, expenses = split_by_type(month_transactions(transactions, period))
    breakdown = category_breakdown(expenses)
    return {
        "period": {"year": period.year, "month": period.month, "label": period.label, "key": period.key},
        "total_expenses": sum(item["amount"] for item in breakdown),
        "categories": breakdown,
    }


def export_rows(data: dict) -> list[dict]:
    """category, amount, percentage ("12.50%")."""
    return [
        {
            "category": item["label"],
            "amount": item["amount"],
            "percentage": f"{item['percentage']:.2f}%",
        }
        for item in data["categories"]
    ]


def build_workbook(transactions: list[Transaction], period: MonthPeriod) -> ExcelWriter:
    data = generate_json(transactions, period)
    ew = ExcelWriter()

    ws = ew.add_sheet("Categorias")
    ew.write_title(ws, "DESPESAS POR CATEGORIA", data["period"]["label"], merge_cols=3)
    row = ew.write_kpi_row(ws, 4, [(data["total_expenses"], "TOTAL DE DESPESAS", "currency")])

    cols = [
        ("label", "text", "Categoria"),
        ("amount", "currency", "Valor"),
        ("percentage", "percent", "Percentual"),
    ]
    ew.write_table(ws, row, cols, data["categories"], freeze=False, show_total=True)
    return ew


def generate_excel(transactions: list[Transaction], period: MonthPeriod) -> bytes:
    return build_workbook(transactions, period).to_bytes()
