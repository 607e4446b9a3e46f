from __future__ import annotations

import re
from typing import Any, Callable

REDACTED = "[REDACTED]"

_EMAIL_RE = re.compile(r"\b([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*(@[A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")

# +237 677 00 00 01, +1 (555) 123-4567, or a bare local number like 677123456.
# Dates, EMP ids and the digits inside idempotency tokens don't match.
_PHONE_RE = re.compile(
    r"(?<![\w+-])"
    r"(?:\+\d+(?:[ .-]?\(\d{2,4}\)|[ .-]?\d{2,4}){1,4}|\d{8,15})"
    r"(?![\w-])"
)

# Any text carrying one of these is dropped whole
_CREDENTIAL_MARKERS = ("access_token", "bearer")

# Keys whose values never reach a log line
_SECRET_KEYS = ("token", "authorization", "secret", "password", "api_key", "salary")


def mask_phone(value: str) -> str:
    digits = re.sub(r"\D", "", value)
    if len(digits) <= 6:
        return value
    lead = "+" if value.startswith("+") else ""
    return f"{lead}{digits[:3]}****{digits[-2:]}"


def mask_name(value: str) -> str:
    """'Alice Ngono' -> 'A*** N***'."""
    return " ".join(f"{part[0]}***" for part in value.split())


def redact_text(value: str) -> str:
    if any(marker in value.lower() for marker in _CREDENTIAL_MARKERS):
        return REDACTED
    masked = _EMAIL_RE.sub(lambda m: f"{m.group(1)}***{m.group(2)}", value)
    return _PHONE_RE.sub(lambda m: mask_phone(m.group(0)), masked)


# Payee names show up in gateway bodies and employee payloads
_KEY_MASKS: dict[str, Callable[[str], str]] = {
    "name": mask_name,
    "display_name": mask_name,
}


def redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return redact_dict(value)
    if isinstance(value, (list, tuple)):
        return [redact_value(v) for v in value]
    return value


def redact_dict(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in payload.items():
        key_l = str(key).lower()
        if any(marker in key_l for marker in _SECRET_KEYS):
            out[key] = REDACTED
        elif key_l in _KEY_MASKS and isinstance(value, str):
            out[key] = _KEY_MASKS[key_l](value)
        else:
            out[key] = redact_value(value)
    return out
