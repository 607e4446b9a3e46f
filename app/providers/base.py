# app/providers/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from app.payouts.model import PayoutRequest


class PayoutSendError(Exception):
    """Transport-level failure: gateway unreachable, timeout, bad response."""


@dataclass(frozen=True)
class SendResult:
    ok: bool
    status: Optional[str] = None
    message: Optional[str] = None
    provider_ref: Optional[str] = None
    response: Optional[dict[str, Any]] = None
    error: Optional[str] = None


class PayoutSender(Protocol):
    def send(self, request: PayoutRequest) -> SendResult: ...
