"""
Spreadsheet endpoints: month rows, CSV import preview, batch save, export.

Imported and edited rows live on the client until they are posted to
``/save``; the import endpoint never writes to storage.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from fintrack.api.dependencies import get_current_user, get_store, parse_month
from fintrack.api.downloads import csv_download
from fintrack.api.response_models import ImportResponse, SaveRowsRequest, SaveRowsResponse
from fintrack.config import EXPORT_LABELS, MESSAGES
from fintrack.data.loader import import_csv
from fintrack.data.schemas import MonthPeriod
from fintrack.data.store import FinanceStore
from fintrack.reports import spreadsheet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/spreadsheet", tags=["spreadsheet"])


@router.get("")
def month_rows(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    return spreadsheet.export_rows(spreadsheet.period_rows(store.transactions, period))


@router.get("/blank-row", dependencies=[Depends(get_current_user)])
def blank_row(period: MonthPeriod = Depends(parse_month)):
    return spreadsheet.blank_row(period).to_json()


@router.post("/import", response_model=ImportResponse, dependencies=[Depends(get_current_user)])
async def import_file(file: UploadFile = File(...)):
    content = await file.read()
    result = import_csv(content)
    logger.info("Imported %s: %d row(s), %d blank line(s)", file.filename, result.count, result.skipped)
    return ImportResponse(
        message=MESSAGES["import_empty"] if result.nothing_imported else MESSAGES["import_done"],
        count=result.count,
        skipped=result.skipped,
        truncated=result.truncated,
        columns=result.columns,
        rows=spreadsheet.export_rows(result.rows),
    )


@router.post("/save", response_model=SaveRowsResponse)
def save_rows(body: SaveRowsRequest, store: FinanceStore = Depends(get_store)):
    """Persist rows flagged new or modified; untouched rows are ignored."""
    if not spreadsheet.pending_rows(body.rows):
        return SaveRowsResponse(message=MESSAGES["nothing_to_save"], saved=0, records=[])
    saved = store.save_rows(body.rows)
    return SaveRowsResponse(
        message=MESSAGES["saved"],
        saved=len(saved),
        records=[t.to_json() for t in saved],
    )


@router.get("/export")
def export_month(period: MonthPeriod = Depends(parse_month), store: FinanceStore = Depends(get_store)):
    rows = spreadsheet.period_rows(store.transactions, period)
    return csv_download(spreadsheet.export_rows(rows), EXPORT_LABELS["spreadsheet"])


@router.post("/export", dependencies=[Depends(get_current_user)])
def export_rows(body: SaveRowsRequest):
    """Export the rows as the client currently holds them, unsaved edits included."""
    return csv_download(spreadsheet.export_rows(body.rows), EXPORT_LABELS["spreadsheet"])
