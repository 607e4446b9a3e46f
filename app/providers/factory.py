# app/providers/factory.py
from __future__ import annotations

from typing import Any, Dict

from app.providers.config import payout_mode

_SENDER_CACHE: Dict[str, Any] = {}


def get_payout_sender():
    key = payout_mode()

    if key in _SENDER_CACHE:
        return _SENDER_CACHE[key]

    if key == "http":
        from app.providers.gateway import HttpPayoutGateway
        sender = HttpPayoutGateway()

    elif key == "mock":
        from app.providers.mock import MockPayoutGateway
        sender = MockPayoutGateway()

    else:
        raise RuntimeError(f"Unsupported PAYOUT_MODE={key!r}")

    _SENDER_CACHE[key] = sender
    return sender


def reset_sender_cache() -> None:
    _SENDER_CACHE.clear()
