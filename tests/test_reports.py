import datetime as dt
import io
import tempfile
import unittest
from pathlib import Path

from openpyxl import load_workbook

from fintrack.data.models import SpreadsheetRow, Transaction
from fintrack.data.schemas import MonthPeriod
from fintrack.excel.styles import LIGHT_GREEN, LIGHT_RED
from fintrack.reports import category_report, monthly_report, spreadsheet

MARCH = MonthPeriod(2024, 2)


def tx(tid, day, amount, kind, category="outros"):
    return Transaction(id=tid, description=f"t{tid}", amount=amount, date=day,
                       type=kind, category=category, payment_method="pix")


TRANSACTIONS = [
    tx("1", dt.date(2024, 3, 1), 5000, "income", "salario"),
    tx("2", dt.date(2024, 3, 2), 600, "expense", "alimentacao"),
    tx("3", dt.date(2024, 3, 9), 400, "expense", "transporte"),
    tx("4", dt.date(2024, 2, 10), 100, "expense", "lazer"),
]


class TestMonthlyReport(unittest.TestCase):
    def test_json(self):
        data = monthly_report.generate_json(TRANSACTIONS, MARCH)
        self.assertEqual(data["summary"]["total_income"], 5000)
        self.assertEqual(data["summary"]["total_expenses"], 1000)
        self.assertEqual(data["summary"]["balance"], 4000)
        self.assertEqual(len(data["trend"]), 6)
        self.assertEqual(data["trend"][-1]["label"], "Mar")
        self.assertEqual([p["balance"] for p in data["balance_history"]], [5000, 4400, 4000])

    def test_export_rows(self):
        rows = monthly_report.export_rows(monthly_report.generate_json(TRANSACTIONS, MARCH))
        self.assertEqual(list(rows[0].keys()), ["month", "income", "expenses", "balance"])
        self.assertEqual(rows[-2], {"month": "Fev", "income": 0.0, "expenses": 100.0, "balance": -100.0})

    def test_excel_workbook(self):
        content = monthly_report.generate_excel(TRANSACTIONS, MARCH)
        wb = load_workbook(io.BytesIO(content))
        self.assertEqual(wb.sheetnames, ["Resumo", "Evolução do Saldo"])
        self.assertEqual(wb["Resumo"]["A1"].value, "RELATÓRIO MENSAL")
        self.assertEqual(wb["Resumo"]["A2"].value, "Março 2024")
        self.assertEqual(wb["Evolução do Saldo"].cell(row=1, column=2).value, "Saldo acumulado")

    def test_excel_for_empty_month(self):
        content = monthly_report.generate_excel([], MARCH)
        self.assertEqual(load_workbook(io.BytesIO(content)).sheetnames, ["Resumo", "Evolução do Saldo"])

    def test_balance_history_marks_sign(self):
        transactions = [
            tx("a", dt.date(2024, 3, 1), 100, "income"),
            tx("b", dt.date(2024, 3, 2), 300, "expense"),
        ]
        wb = load_workbook(io.BytesIO(monthly_report.generate_excel(transactions, MARCH)))
        ws = wb["Evolução do Saldo"]
        self.assertEqual(ws.cell(row=2, column=2).value, 100)
        self.assertTrue(ws.cell(row=2, column=2).fill.start_color.rgb.endswith(LIGHT_GREEN))
        self.assertEqual(ws.cell(row=3, column=2).value, -200)
        self.assertTrue(ws.cell(row=3, column=2).fill.start_color.rgb.endswith(LIGHT_RED))

    def test_trend_marks_negative_months(self):
        ws = load_workbook(io.BytesIO(monthly_report.generate_excel(TRANSACTIONS, MARCH)))["Resumo"]
        fills = {
            ws.cell(row=r, column=1).value: ws.cell(row=r, column=5).fill.start_color.rgb
            for r in range(1, ws.max_row + 1)
            if ws.cell(row=r, column=1).value in ("Fev", "Mar")
        }
        self.assertTrue(fills["Fev"].endswith(LIGHT_RED))
        self.assertFalse(fills["Mar"].endswith(LIGHT_RED))

    def test_save_writes_workbook_to_disk(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = monthly_report.build_workbook(TRANSACTIONS, MARCH).save(Path(tmp) / "out" / "monthly.xlsx")
            self.assertTrue(path.exists())
            self.assertEqual(load_workbook(path).sheetnames, ["Resumo", "Evolução do Saldo"])


class TestCategoryReport(unittest.TestCase):
    def test_json(self):
        data = category_report.generate_json(TRANSACTIONS, MARCH)
        self.assertEqual(data["total_expenses"], 1000)
        self.assertEqual([c["category"] for c in data["categories"]], ["alimentacao", "transporte"])

    def test_export_rows_use_labels_and_percent_text(self):
        rows = category_report.export_rows(category_report.generate_json(TRANSACTIONS, MARCH))
        self.assertEqual(rows, [
            {"category": "Alimentação", "amount": 600.0, "percentage": "60.00%"},
            {"category": "Transporte", "amount": 400.0, "percentage": "40.00%"},
        ])

    def test_excel_workbook(self):
        wb = load_workbook(io.BytesIO(category_report.generate_excel(TRANSACTIONS, MARCH)))
        self.assertEqual(wb.sheetnames, ["Categorias"])


class TestSpreadsheet(unittest.TestCase):
    def test_period_rows(self):
        rows = spreadsheet.period_rows(TRANSACTIONS, MARCH)
        self.assertEqual({r.id for r in rows}, {"1", "2", "3"})
        self.assertTrue(all(not r.is_new for r in rows))

    def test_blank_row_clamps_day(self):
        row = spreadsheet.blank_row(MonthPeriod(2024, 1), today=dt.date(2024, 5, 31))
        self.assertEqual(row.date, dt.date(2024, 2, 29))
        self.assertTrue(row.is_new)
        self.assertTrue(row.id.startswith("new-"))
        self.assertEqual(row.amount, 0.0)

    def test_pending_rows(self):
        rows = [
            SpreadsheetRow(id="a", date=dt.date(2024, 3, 1)),
            SpreadsheetRow(id="b", date=dt.date(2024, 3, 1), is_new=True),
            SpreadsheetRow(id="c", date=dt.date(2024, 3, 1), is_modified=True),
        ]
        self.assertEqual([r.id for r in spreadsheet.pending_rows(rows)], ["b", "c"])

    def test_export_rows_are_camel_case(self):
        rows = spreadsheet.export_rows(spreadsheet.period_rows(TRANSACTIONS, MARCH))
        self.assertIn("paymentMethod", rows[0])
        self.assertIn("isNew", rows[0])


if __name__ == "__main__":
    unittest.main()
