from __future__ import annotations

from dataclasses import dataclass

from settings import settings


def payout_mode() -> str:
    return (settings.PAYOUT_MODE or "mock").strip().lower()


def is_strict_startup_validation() -> bool:
    return bool(settings.PAYOUT_STRICT_STARTUP_VALIDATION)


@dataclass(frozen=True)
class GatewayConfig:
    mode: str  # "mock" | "http"
    url: str
    api_key: str
    timeout_s: float


def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        mode=payout_mode(),
        url=(settings.PAYOUT_GATEWAY_URL or "").strip(),
        api_key=(settings.PAYOUT_GATEWAY_API_KEY or "").strip(),
        timeout_s=float(settings.PAYOUT_HTTP_TIMEOUT_S or 20.0),
    )
