# routes/payouts.py
from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from app.payouts.batches import registry
from app.payouts.csv_parser import parse_csv, template_rows, to_payout_rows
from app.payouts.dispatcher import PayoutBatch
from app.payouts.manual import UnknownEmployee, send_manual_payout
from app.payouts.model import PayoutMedium
from app.providers.base import PayoutSender
from deps.auth import get_current_admin
from deps.payouts import get_sender
from schemas import (
    BatchProgressOut,
    ManualPayoutRequest,
    ManualPayoutResponse,
    RowOutcomeOut,
)
from services.metrics import increment_batches_started
from settings import settings
from storage import Admin, get_storage

logger = logging.getLogger("hrdesk.payouts.http")
router = APIRouter(prefix="/api/v1/admin/payouts", tags=["payouts"])


def _progress_out(batch: PayoutBatch) -> BatchProgressOut:
    s = batch.summary()
    return BatchProgressOut(
        batch_id=s.batch_id,
        state=s.state,
        total=s.total,
        done=s.done,
        succeeded=s.succeeded,
        failed=s.failed,
        outcomes=[
            RowOutcomeOut(
                index=o.index,
                employee_id=o.employee_id,
                ok=o.ok,
                reason=o.reason,
                external_id=o.external_id,
            )
            for o in s.outcomes
        ],
    )


def _medium(value: Optional[str]) -> PayoutMedium:
    default = PayoutMedium.parse(settings.PAYOUT_DEFAULT_MEDIUM)
    if not value:
        return default
    try:
        return PayoutMedium.parse(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="UNSUPPORTED_MEDIUM")


@router.post("/manual", response_model=ManualPayoutResponse)
def create_manual_payout(
    body: ManualPayoutRequest,
    admin: Admin = Depends(get_current_admin),
    sender: PayoutSender = Depends(get_sender),
):
    try:
        outcome = send_manual_payout(
            sender,
            employee_id=body.employee_id,
            amount=body.amount,
            medium=_medium(body.medium),
            note=body.note,
            date=body.date,
            lookup=get_storage().lookup,
        )
    except UnknownEmployee:
        raise HTTPException(status_code=404, detail="EMPLOYEE_NOT_FOUND")

    if not outcome.ok:
        raise HTTPException(
            status_code=502,
            detail={
                "error": "PAYOUT_SEND_FAILED",
                "reason": outcome.reason,
                "external_id": outcome.external_id,
            },
        )

    return ManualPayoutResponse(
        ok=True,
        employee_id=body.employee_id,
        external_id=outcome.external_id,
        response=outcome.response,
    )


@router.post("/batches", response_model=BatchProgressOut, status_code=202)
def start_batch(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    default_date: Optional[str] = Form(None),
    medium: Optional[str] = Form(None),
    admin: Admin = Depends(get_current_admin),
    sender: PayoutSender = Depends(get_sender),
):
    try:
        text = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="INVALID_CSV")

    rows = to_payout_rows(parse_csv(text))
    if not rows:
        raise HTTPException(status_code=400, detail="EMPTY_CSV")

    batch = PayoutBatch(
        rows,
        get_storage().directory_snapshot(),
        sender,
        default_date=default_date or date.today().isoformat(),
        medium=_medium(medium),
    )
    registry.add(batch)
    increment_batches_started()
    logger.info(
        "payout batch queued batch_id=%s rows=%s file=%s admin=%s",
        batch.batch_id,
        len(rows),
        file.filename,
        admin.id,
    )

    background_tasks.add_task(batch.run)
    return _progress_out(batch)


@router.get("/batches/{batch_id}", response_model=BatchProgressOut)
def get_batch(batch_id: str, admin: Admin = Depends(get_current_admin)):
    batch = registry.get(batch_id)
    if batch is None:
        raise HTTPException(status_code=404, detail="BATCH_NOT_FOUND")
    return _progress_out(batch)


@router.post("/batches/{batch_id}/cancel", response_model=BatchProgressOut)
def cancel_batch(batch_id: str, admin: Admin = Depends(get_current_admin)):
    batch = registry.get(batch_id)
    if batch is None:
        raise HTTPException(status_code=404, detail="BATCH_NOT_FOUND")
    batch.request_cancel()
    return _progress_out(batch)


@router.get("/template.csv")
def payouts_template(admin: Admin = Depends(get_current_admin)):
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(template_rows(date.today().isoformat(), settings.PAYOUT_DEFAULT_CURRENCY))
    response = Response(content=buffer.getvalue(), media_type="text/csv")
    response.headers["Content-Disposition"] = "attachment; filename=payments_template.csv"
    return response
