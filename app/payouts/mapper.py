from __future__ import annotations

from typing import Callable, Optional, Union

from app.payouts.model import (
    EmployeeDirectoryEntry,
    PayoutMedium,
    PayoutRequest,
    PayoutRow,
    Rejection,
)
from app.payouts.tokens import new_external_id

REASON_MISSING_EMPLOYEE_ID = "MISSING_EMPLOYEE_ID"
REASON_EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"

Lookup = Callable[[str], Optional[EmployeeDirectoryEntry]]


def parse_amount(raw: str | None) -> float:
    # Non-numeric amounts are not rejected here; NaN goes on to the gateway
    try:
        return float((raw or "").strip())
    except ValueError:
        return float("nan")


def default_note(date: str) -> str:
    return f"Payout on {date}"


def build_request(
    entry: EmployeeDirectoryEntry,
    *,
    employee_id: str,
    amount: float,
    medium: PayoutMedium,
    note: str | None,
    date: str,
    external_id: str,
) -> PayoutRequest:
    return PayoutRequest(
        amount=amount,
        phone=entry.phone,
        medium=medium,
        name=entry.display_name,
        email=entry.email,
        user_id=employee_id,
        external_id=external_id,
        message=(note or "").strip() or default_note(date),
    )


def map_row(
    row: PayoutRow,
    lookup: Lookup,
    *,
    default_date: str,
    medium: PayoutMedium,
) -> Union[PayoutRequest, Rejection]:
    """
    Resolve one CSV row against the employee directory.

    Contact details always come from the directory, the row only supplies
    amount, date and note. Currency is informational and not forwarded.
    """
    if not row.employee_id:
        return Rejection(reason=REASON_MISSING_EMPLOYEE_ID)

    entry = lookup(row.employee_id)
    if entry is None:
        return Rejection(reason=REASON_EMPLOYEE_NOT_FOUND, employee_id=row.employee_id)

    date = row.date or default_date
    return build_request(
        entry,
        employee_id=row.employee_id,
        amount=parse_amount(row.amount),
        medium=medium,
        note=row.note,
        date=date,
        external_id=new_external_id("batch", row.employee_id, row.index),
    )
