from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Optional

from app.payouts.dispatcher import dispatch_one
from app.payouts.mapper import Lookup, build_request
from app.payouts.model import PayoutMedium, PayoutRequest, RowOutcome
from app.payouts.tokens import new_external_id

logger = logging.getLogger("hrdesk.payouts")


class UnknownEmployee(LookupError):
    pass


def build_manual_request(
    *,
    employee_id: str,
    amount: float,
    medium: PayoutMedium,
    note: Optional[str],
    lookup: Lookup,
    date: Optional[str] = None,
) -> PayoutRequest:
    entry = lookup(employee_id)
    if entry is None:
        raise UnknownEmployee(employee_id)

    return build_request(
        entry,
        employee_id=employee_id,
        amount=float(amount),
        medium=medium,
        note=note,
        date=date or date_cls.today().isoformat(),
        external_id=new_external_id("manual", employee_id),
    )


def send_manual_payout(
    sender,
    *,
    employee_id: str,
    amount: float,
    medium: PayoutMedium,
    note: Optional[str],
    lookup: Lookup,
    date: Optional[str] = None,
) -> RowOutcome:
    request = build_manual_request(
        employee_id=employee_id,
        amount=amount,
        medium=medium,
        note=note,
        lookup=lookup,
        date=date,
    )
    outcome = dispatch_one(request, sender)
    logger.info(
        "manual payout employee_id=%s external_id=%s ok=%s",
        employee_id,
        request.external_id,
        outcome.ok,
    )
    return outcome
