"""/v1/transactions - list, manual entry, delete, CSV import and export"""

import logging
import time
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from finance_mentor.api.dependencies import get_request_id, get_state_repository, get_today
from finance_mentor.api.v1.schemas import (
    ImportResponse,
    TransactionCreate,
    TransactionListResponse,
    TransactionSchema,
)
from finance_mentor.config import settings
from finance_mentor.domain.exceptions import InvalidTransactionDataError, NotFoundError, TransactionImportError
from finance_mentor.domain.models import Category, TransactionType
from finance_mentor.domain.normalizer import create_transaction, parse_transactions
from finance_mentor.infrastructure import serialization
from finance_mentor.infrastructure.database.repositories import StateRepository
from finance_mentor.infrastructure.observability.logging import log_import
from finance_mentor.infrastructure.observability.metrics import record_import

router = APIRouter()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    search: Optional[str] = None,
    type: Optional[TransactionType] = None,
    category: Optional[Category] = None,
    days: Optional[int] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    """Stored transactions, newest first, narrowed by any supplied filter"""
    matches = repo.load_transactions().filter(
        search=search,
        txn_type=type,
        category=category,
        days=days,
        min_amount=min_amount,
        max_amount=max_amount,
        today=today,
    )
    return TransactionListResponse(
        transactions=[TransactionSchema.from_domain(t) for t in matches],
        count=len(matches),
    )


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def add_transaction(
    body: TransactionCreate,
    repo: StateRepository = Depends(get_state_repository),
):
    transactions = repo.load_transactions()
    try:
        txn = create_transaction(body.date, body.amount, body.type, body.category, body.description, transactions)
    except InvalidTransactionDataError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.save_transactions(transactions.add(txn))
    return TransactionSchema.from_domain(txn)


@router.delete("/transactions/{txn_id}", status_code=204)
def delete_transaction(txn_id: str, repo: StateRepository = Depends(get_state_repository)):
    try:
        remaining = repo.load_transactions().remove(txn_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    repo.save_transactions(remaining)
    return Response(status_code=204)


@router.post("/transactions/import", response_model=ImportResponse, status_code=201)
async def import_transactions(
    request: Request,
    repo: StateRepository = Depends(get_state_repository),
):
    """
    Import a raw CSV export sent as the request body.

    Flow:
    1. Detect columns and parse rows against the stored ids
    2. Prepend the accepted batch to the stored set
    3. Record metrics and a structured log line
    """
    start_time = time.time()
    request_id = get_request_id(request)
    raw_text = (await request.body()).decode("utf-8-sig", errors="replace")
    transactions = repo.load_transactions()

    try:
        result = parse_transactions(raw_text, transactions, delimiter=settings.csv_delimiter)
    except TransactionImportError as e:
        duration_ms = (time.time() - start_time) * 1000
        record_import(0, 0, failure_reason=e.reason)
        log_import(request_id, 0, 0, duration_ms, failure_reason=e.reason)
        raise HTTPException(status_code=422, detail={"reason": e.reason, "message": str(e)})

    repo.save_transactions(transactions.extend(result.transactions))

    duration_ms = (time.time() - start_time) * 1000
    record_import(len(result.transactions), result.skipped_rows)
    log_import(request_id, len(result.transactions), result.skipped_rows, duration_ms)

    return ImportResponse(
        imported=len(result.transactions),
        skipped_rows=result.skipped_rows,
        transactions=[TransactionSchema.from_domain(t) for t in result.transactions],
    )


@router.get("/transactions/export")
def export_transactions(
    format: Literal["csv", "json"] = "csv",
    range: Literal["all", "month", "year", "custom"] = "all",
    start: Optional[date] = None,
    end: Optional[date] = None,
    repo: StateRepository = Depends(get_state_repository),
    today: date = Depends(get_today),
):
    """Download the stored transactions as CSV or JSON for a date range"""
    range_start, range_end = serialization.export_range_bounds(range, today, start, end)
    selected = repo.load_transactions().filter(start=range_start, end=range_end)
    filename = f"transactions_{today.isoformat()}.{format}"

    if format == "json":
        content, media_type = serialization.export_json(selected), "application/json"
    else:
        content, media_type = serialization.export_csv(selected), "text/csv"

    logging.info("Transactions exported", extra={"format": format, "range": range, "count": len(selected)})
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
