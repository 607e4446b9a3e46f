# settings.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal



class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # -----------------------
    # JWT
    # -----------------------
    JWT_SECRET: str = Field(default="dev-secret-change-me", min_length=16)
    JWT_ALG: str = Field(default="HS256")
    JWT_ACCESS_MINUTES: int = Field(default=24 * 60)

    # -----------------------
    # Seeded dashboard admin
    # -----------------------
    DEFAULT_ADMIN_NAME: str = "John Doe"
    DEFAULT_ADMIN_EMAIL: str = "admin@company.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_PHONE: str = "+1 (555) 123-4567"

    # -----------------------
    # Employee photos
    # -----------------------
    UPLOAD_DIR: str = "uploads"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024

    # -----------------------
    # Payouts (Mode Switch)
    # -----------------------
    PAYOUT_MODE: Literal["mock", "http"] = "mock"
    PAYOUT_STRICT_STARTUP_VALIDATION: bool = False

    PAYOUT_GATEWAY_URL: str = ""
    PAYOUT_GATEWAY_API_KEY: str = ""
    PAYOUT_HTTP_TIMEOUT_S: float = 20.0

    # "mobile money" or "orange money"
    PAYOUT_DEFAULT_MEDIUM: str = "mobile money"
    PAYOUT_DEFAULT_CURRENCY: str = "XAF"

    # finished CSV batches kept in memory for polling
    PAYOUT_KEEP_FINISHED_BATCHES: int = Field(default=20, ge=0)



settings = Settings()
