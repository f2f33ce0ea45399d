#!/usr/bin/env python3
"""
fintrack CLI — API server plus offline tools for spreadsheet CSV files.

USAGE:
  python -m fintrack.cli serve                                   # Start API server
  python -m fintrack.cli serve --port 8000 --reload

  python -m fintrack.cli import extrato.csv                      # Preview what an import would produce
  python -m fintrack.cli summary extrato.csv --year 2024 --month 2
  python -m fintrack.cli report extrato.csv --kind categories --output categorias.xlsx
"""
from __future__ import annotations

import argparse
import os
from pathlib import Path

from pydantic import ValidationError

from fintrack.data.loader import import_csv
from fintrack.data.models import Transaction
from fintrack.data.schemas import MonthPeriod
from fintrack.errors import FinanceError


def _load_transactions(path: str) -> list[Transaction]:
    """Imported rows that are valid transactions (zero amounts are dropped)."""
    result = import_csv(Path(path).read_bytes())
    transactions = []
    for row in result.rows:
        try:
            transactions.append(row.to_transaction())
        except ValidationError:
            continue
    dropped = result.count - len(transactions)
    if dropped:
        print(f"  ({dropped} row(s) without a valid amount or description ignored)")
    return transactions


def _build_period(args) -> MonthPeriod:
    current = MonthPeriod.current()
    year = args.year if args.year is not None else current.year
    month = args.month if args.month is not None else current.month
    return MonthPeriod(year, month)


def _money(value: float) -> str:
    formatted = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{'-' if value < 0 else ''}R$ {formatted}"


def cmd_import(args):
    """Show the rows an import of FILE would produce."""
    result = import_csv(Path(args.file).read_bytes())
    print("\nColumns: " + ", ".join(f"{role}={idx}" for role, idx in result.columns.items()))
    if result.nothing_imported:
        print("Nenhum registro importado\n")
        return

    print(f"{result.count} row(s), {result.skipped} line(s) skipped, {result.truncated} truncated\n")
    for row in result.rows[: args.limit]:
        print(
            f"  {row.date:%d/%m/%Y}  {row.type.value:<7}  {_money(row.amount):>14}  "
            f"{row.category.value:<14} {row.payment_method.value:<8} {row.description[:40]}"
        )
    if result.count > args.limit:
        print(f"  ... {result.count - args.limit} more")
    print()


def cmd_summary(args):
    """Aggregate FILE for one month."""
    from fintrack.analytics.summary import monthly_summary

    period = _build_period(args)
    data = monthly_summary(_load_transactions(args.file), period)

    print("\n" + "=" * 60)
    print(f"  {period.label.upper()}")
    print("=" * 60)
    print(f"  Receitas:  {_money(data['total_income']):>16}")
    print(f"  Despesas:  {_money(data['total_expenses']):>16}")
    print(f"  Saldo:     {_money(data['balance']):>16}")
    print(f"  Transações: {data['transaction_count']}")

    if data["expenses_by_category"]:
        print("\n  Despesas por categoria:")
        for item in data["expenses_by_category"]:
            print(f"    {item['label']:<22}{_money(item['amount']):>16}  {item['percentage']:6.2f}%")

    print("\n  Últimos meses:")
    for item in data["monthly_trend"]:
        print(
            f"    {item['label']}/{item['year']}  +{_money(item['income']):>14}  "
            f"-{_money(item['expenses']):>14}  = {_money(item['balance']):>14}"
        )
    print()


def cmd_report(args):
    """Write the monthly or category workbook for FILE."""
    from fintrack.reports import category_report, monthly_report

    period = _build_period(args)
    module = monthly_report if args.kind == "monthly" else category_report
    workbook = module.build_workbook(_load_transactions(args.file), period)
    out = workbook.save(args.output or f"{args.kind}_{period.key}.xlsx")
    print(f"\nReport saved to: {out}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting fintrack API on port {args.port}...")
    uvicorn.run("fintrack.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _add_month_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", type=int, help="Year (default: current)")
    parser.add_argument("--month", type=int, choices=range(12), metavar="0-11",
                        help="Month, 0 = January (default: current)")


def main():
    parser = argparse.ArgumentParser(
        description="fintrack — personal finance API and spreadsheet tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    # import subcommand
    import_parser = subparsers.add_parser("import", help="Preview a spreadsheet CSV import")
    import_parser.add_argument("file", help="CSV file")
    import_parser.add_argument("--limit", type=int, default=20, help="Rows to print (default 20)")
    import_parser.set_defaults(func=cmd_import)

    # summary subcommand
    summary_parser = subparsers.add_parser("summary", help="Monthly summary of a CSV file")
    summary_parser.add_argument("file", help="CSV file")
    _add_month_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    # report subcommand
    report_parser = subparsers.add_parser("report", help="Excel report from a CSV file")
    report_parser.add_argument("file", help="CSV file")
    report_parser.add_argument("--kind", choices=["monthly", "categories"], default="monthly")
    report_parser.add_argument("--output", help="Output .xlsx path")
    _add_month_args(report_parser)
    report_parser.set_defaults(func=cmd_report)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except FinanceError as exc:
        parser.exit(1, f"error: {exc.message}\n")


if __name__ == "__main__":
    main()
