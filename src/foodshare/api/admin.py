"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from foodshare.api.auth import require_admin

if TYPE_CHECKING:
    from foodshare.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/expire", dependencies=[Depends(require_admin)])
async def expire_listings(
    request: Request, now: datetime | None = None
) -> dict[str, object]:
    """Run one expiry sweep, for external cron triggers."""
    container: AppContainer = request.app.state.container
    if now is not None and now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    expired = await container.reservation_service.expire_listings(now)
    return {"expired": [str(listing_id) for listing_id in expired]}
