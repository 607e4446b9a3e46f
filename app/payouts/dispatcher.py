from __future__ import annotations

import logging
import threading
import uuid
from typing import Mapping, Optional

from app.payouts.mapper import map_row
from app.payouts.model import (
    BatchSummary,
    EmployeeDirectoryEntry,
    PayoutMedium,
    PayoutRequest,
    PayoutRow,
    Rejection,
    RowOutcome,
)
from app.payouts.progress import BatchProgress, ProgressObserver, ProgressSnapshot
from app.payouts.state_machine import CANCELLED, COMPLETED, IDLE, RUNNING, assert_transition
from app.providers.base import PayoutSender, PayoutSendError
from services.metrics import increment_payout_attempt, increment_payout_rejection
from services.redaction import redact_text

logger = logging.getLogger("hrdesk.payouts")


class PayoutBatch:
    """
    Sequential CSV payout run.

    Rows are dispatched strictly in order; a row's send fully resolves before
    the next row starts, so at most one request is in flight. Row failures
    (unknown employee, send errors, non-success answers) are recorded and the
    batch moves on. Nothing is retried.

    The employee directory is copied when the batch is built and never
    re-read. Cancellation is cooperative and only checked between rows.
    """

    def __init__(
        self,
        rows: list[PayoutRow],
        directory: Mapping[str, EmployeeDirectoryEntry],
        sender: PayoutSender,
        *,
        default_date: str,
        medium: PayoutMedium = PayoutMedium.MOBILE_MONEY,
        batch_id: Optional[str] = None,
        observer: Optional[ProgressObserver] = None,
    ):
        self.batch_id = batch_id or str(uuid.uuid4())
        self.rows = list(rows)
        self._directory = dict(directory)
        self.sender = sender
        self.default_date = default_date
        self.medium = medium
        self.state = IDLE
        self.progress = BatchProgress(total=len(self.rows), observer=observer)
        self.outcomes: list[RowOutcome] = []
        self._cancel = threading.Event()
        # outcomes and counters change together; summary() reads both under it
        self._lock = threading.RLock()

    def lookup(self, employee_id: str) -> Optional[EmployeeDirectoryEntry]:
        return self._directory.get(employee_id)

    def request_cancel(self) -> None:
        self._cancel.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    def snapshot(self) -> ProgressSnapshot:
        return self.progress.snapshot()

    def summary(self) -> BatchSummary:
        with self._lock:
            s = self.progress.snapshot()
            outcomes = list(self.outcomes)
        return BatchSummary(
            batch_id=self.batch_id,
            state=self.state,
            total=s.total,
            done=s.done,
            succeeded=s.succeeded,
            failed=s.failed,
            outcomes=outcomes,
        )

    def run(self) -> BatchSummary:
        self._transition(RUNNING)
        logger.info("payout batch start batch_id=%s total=%s", self.batch_id, self.progress.total)

        for row in self.rows:
            if self._cancel.is_set():
                logger.info(
                    "payout batch cancelled batch_id=%s done=%s remaining=%s",
                    self.batch_id,
                    self.progress.snapshot().done,
                    self.progress.snapshot().remaining,
                )
                self._transition(CANCELLED)
                return self.summary()
            self._process_row(row)

        self._transition(COMPLETED)
        s = self.progress.snapshot()
        logger.info(
            "payout batch completed batch_id=%s succeeded=%s failed=%s total=%s",
            self.batch_id,
            s.succeeded,
            s.failed,
            s.total,
        )
        return self.summary()

    def _transition(self, new_state: str) -> None:
        assert_transition(self.state, new_state)
        self.state = new_state

    def _process_row(self, row: PayoutRow) -> None:
        resolved = map_row(row, self.lookup, default_date=self.default_date, medium=self.medium)

        if isinstance(resolved, Rejection):
            logger.info(
                "payout row rejected batch_id=%s row=%s employee_id=%s reason=%s",
                self.batch_id,
                row.index,
                resolved.employee_id,
                resolved.reason,
            )
            increment_payout_rejection(resolved.reason)
            self._fail(row, reason=resolved.reason)
            return

        outcome = dispatch_one(resolved, self.sender, row_index=row.index)
        self._record(outcome)

    def _fail(self, row: PayoutRow, *, reason: str) -> None:
        self._record(RowOutcome(index=row.index, employee_id=row.employee_id, ok=False, reason=reason))

    def _record(self, outcome: RowOutcome) -> None:
        with self._lock:
            self.outcomes.append(outcome)
            if outcome.ok:
                self.progress.record_success()
            else:
                self.progress.record_failure()


def dispatch_one(request: PayoutRequest, sender: PayoutSender, *, row_index: int = 0) -> RowOutcome:
    """Send one request and fold every possible result into a RowOutcome."""
    try:
        res = sender.send(request)
    except PayoutSendError as exc:
        logger.warning(
            "payout send failed external_id=%s phone=%s error=%s",
            request.external_id,
            redact_text(request.phone),
            exc,
        )
        increment_payout_attempt(request.medium.value, "error")
        return RowOutcome(
            index=row_index,
            employee_id=request.user_id,
            ok=False,
            reason=f"SEND_FAILED: {exc}",
            external_id=request.external_id,
        )
    except Exception as exc:
        logger.exception("payout send crashed external_id=%s", request.external_id)
        increment_payout_attempt(request.medium.value, "error")
        return RowOutcome(
            index=row_index,
            employee_id=request.user_id,
            ok=False,
            reason=f"SEND_FAILED: {type(exc).__name__}: {exc}",
            external_id=request.external_id,
        )

    if res.ok:
        increment_payout_attempt(request.medium.value, "success")
        return RowOutcome(
            index=row_index,
            employee_id=request.user_id,
            ok=True,
            external_id=request.external_id,
            response=res.response,
        )

    logger.info(
        "payout send rejected external_id=%s error=%s message=%s",
        request.external_id,
        res.error,
        res.message,
    )
    increment_payout_attempt(request.medium.value, "failed")
    return RowOutcome(
        index=row_index,
        employee_id=request.user_id,
        ok=False,
        reason=res.error or res.message or "SEND_REJECTED",
        external_id=request.external_id,
        response=res.response,
    )
