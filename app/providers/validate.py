from __future__ import annotations

import logging

from app.payouts.model import PayoutMedium
from app.providers.config import gateway_config, is_strict_startup_validation
from settings import settings

logger = logging.getLogger("hrdesk")

ALLOWED_MODES = {"mock", "http"}


def validate_payout_startup() -> None:
    cfg = gateway_config()
    strict = is_strict_startup_validation()

    logger.info(
        "payout startup check: mode=%s strict=%s gateway_url=%s",
        cfg.mode,
        strict,
        cfg.url or "<none>",
    )

    if cfg.mode not in ALLOWED_MODES:
        raise RuntimeError(
            "Payout startup validation failed. "
            f"Invalid PAYOUT_MODE={cfg.mode!r}. Allowed: {', '.join(sorted(ALLOWED_MODES))}"
        )

    try:
        PayoutMedium.parse(settings.PAYOUT_DEFAULT_MEDIUM)
    except ValueError as exc:
        raise RuntimeError(f"Payout startup validation failed. {exc}") from exc

    if cfg.mode == "mock":
        return

    missing: list[str] = []
    if not cfg.url:
        missing.append("PAYOUT_GATEWAY_URL")
    # Some sandbox gateways accept unauthenticated calls
    if strict and not cfg.api_key:
        missing.append("PAYOUT_GATEWAY_API_KEY")

    if missing:
        raise RuntimeError(
            "Payout startup validation failed. "
            f"mode={cfg.mode} Missing required env vars: " + ", ".join(missing)
        )
