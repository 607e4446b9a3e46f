from __future__ import annotations

import math
from typing import Optional

from app.payouts.model import PayoutRequest
from app.providers.base import PayoutSendError, SendResult


class MockPayoutGateway:
    """
    Sandbox/dev sender.

    - succeed=False returns a non-success result (HTTP 502 style).
    - raise_error=True raises PayoutSendError like a transport failure.
    - Invalid amounts (NaN, inf or <= 0) are rejected the way a real gateway would.
    Every request it sees is kept in `sent`, in call order.
    """

    def __init__(self, *, succeed: bool = True, raise_error: bool = False, fail_user_ids: Optional[set[str]] = None):
        self.succeed = succeed
        self.raise_error = raise_error
        self.fail_user_ids = set(fail_user_ids or ())
        self.sent: list[PayoutRequest] = []

    def send(self, request: PayoutRequest) -> SendResult:
        self.sent.append(request)

        if self.raise_error:
            raise PayoutSendError("Gateway timeout")

        if not math.isfinite(request.amount) or request.amount <= 0:
            return SendResult(
                ok=False,
                status="REJECTED",
                message="Invalid amount",
                response={"http_status": 400, "mock": True},
                error="HTTP 400",
            )

        if not self.succeed or request.user_id in self.fail_user_ids:
            return SendResult(
                ok=False,
                status="FAILED",
                message="Gateway unavailable",
                response={"http_status": 502, "mock": True},
                error="HTTP 502",
            )

        return SendResult(
            ok=True,
            status="SUCCESS",
            message="Payout accepted",
            provider_ref=f"mock-{request.external_id}",
            response={"http_status": 200, "mock": True},
        )
