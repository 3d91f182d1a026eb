"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    store_timeout_seconds: float = Field(default=5.0, gt=0)
    donor_points_per_donation: int = Field(default=50, ge=0)
    recipient_points_per_claim: int = Field(default=10, ge=0)
    notifier_webhook_url: str | None = None
    expiry_sweep_interval_seconds: float = Field(default=0.0, ge=0)
    leaderboard_size: int = Field(default=10, gt=0)
    cors_allowed_origins: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse a comma-separated list of CORS origins from env."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
