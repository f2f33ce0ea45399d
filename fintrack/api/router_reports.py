"""
Report endpoints — monthly and category reports as JSON, CSV or Excel.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fintrack.analytics.common import sanitize_for_json
from fintrack.api.dependencies import get_store, parse_month
from fintrack.api.downloads import csv_download, xlsx_download
from fintrack.config import EXPORT_LABELS
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import FinanceStore
from fintrack.reports import category_report, monthly_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/monthly")
def monthly(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    return JSONResponse(content=sanitize_for_json(monthly_report.generate_json(store.transactions, period)))


@router.get("/monthly.csv")
def monthly_csv(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    data = monthly_report.generate_json(store.transactions, period)
    return csv_download(monthly_report.export_rows(data), EXPORT_LABELS["monthly_report"])


@router.get("/monthly.xlsx")
def monthly_xlsx(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    content = monthly_report.generate_excel(store.transactions, period)
    return xlsx_download(content, EXPORT_LABELS["monthly_report"])


@router.get("/categories")
def categories(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    return JSONResponse(content=sanitize_for_json(category_report.generate_json(store.transactions, period)))


@router.get("/categories.csv")
def categories_csv(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    """category, amount, percentage; 404 when the month has no expenses."""
    data = category_report.generate_json(store.transactions, period)
    return csv_download(category_report.export_rows(data), EXPORT_LABELS["category_report"])


@router.get("/categories.xlsx")
def categories_xlsx(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    content = category_report.generate_excel(store.transactions, period)
    return xlsx_download(content, EXPORT_LABELS["category_report"])
