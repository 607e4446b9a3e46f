from __future__ import annotations

import os
from datetime import datetime, timezone

from fastapi import APIRouter

from app.providers.config import payout_mode

router = APIRouter(tags=["health"])


def _resolve_env() -> str:
    return (os.getenv("APP_ENV") or os.getenv("ENV") or "").strip()


def _resolve_git_sha() -> str | None:
    return (os.getenv("GIT_SHA") or "").strip() or None


@router.get("/health")
def health():
    return {
        "ok": True,
        "env": _resolve_env(),
        "payout_mode": payout_mode(),
        "version": os.getenv("APP_VERSION", "1.0.0"),
        "git_sha": _resolve_git_sha(),
    }


@router.get("/api/v1/mobile/health")
def mobile_health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
