# app/providers/gateway.py
from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.payouts.model import PayoutRequest
from app.providers.base import PayoutSendError, SendResult
from app.providers.config import GatewayConfig, gateway_config
from app.providers.http import HttpClient, is_success_http
from services.redaction import redact_dict

logger = logging.getLogger("hrdesk.payouts.gateway")


class HttpPayoutGateway:
    """
    Payout-send collaborator over HTTP.

    POSTs the wire form of a PayoutRequest to PAYOUT_GATEWAY_URL. A 2xx
    answer is a success; any other status is a failed send. Timeouts and
    transport errors raise PayoutSendError.
    """

    def __init__(self, cfg: Optional[GatewayConfig] = None, http: Optional[HttpClient] = None):
        self.cfg = cfg or gateway_config()
        self.http = http or HttpClient(timeout_s=self.cfg.timeout_s)

    def send(self, request: PayoutRequest) -> SendResult:
        if not self.cfg.url:
            raise PayoutSendError("PAYOUT_GATEWAY_URL is not configured")

        headers = {
            "Content-Type": "application/json",
            "Idempotency-Key": request.external_id,
        }
        if self.cfg.api_key:
            headers["Authorization"] = f"Bearer {self.cfg.api_key}"

        body = request.to_wire()
        logger.info("payout send external_id=%s body=%s", request.external_id, redact_dict(body))

        try:
            resp = self.http.post(self.cfg.url, headers=headers, json_body=body, debug=True)
        except httpx.TimeoutException as exc:
            raise PayoutSendError("Gateway timeout") from exc
        except httpx.HTTPError as exc:
            raise PayoutSendError(f"Gateway error: {exc}") from exc

        payload = resp.json or {}
        status = str(payload.get("status") or "") or None
        message = str(payload.get("message") or "") or None
        provider_ref = payload.get("reference") or payload.get("id")

        if is_success_http(resp.status_code):
            return SendResult(
                ok=True,
                status=status,
                message=message,
                provider_ref=str(provider_ref) if provider_ref else None,
                response={"http_status": resp.status_code, "body": resp.json},
            )

        return SendResult(
            ok=False,
            status=status,
            message=message,
            response={"http_status": resp.status_code, "body": resp.json, "text": resp.text[:500]},
            error=f"HTTP {resp.status_code}",
        )
