"""Request authentication dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from foodshare.domain.profiles import Actor

if TYPE_CHECKING:
    from foodshare.containers import AppContainer

_BEARER_PREFIX = "bearer "


async def require_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the Supabase access token in the Authorization header."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    token = authorization[len(_BEARER_PREFIX) :].strip()
    container: AppContainer = request.app.state.container
    user_id = await container.call_store(container.auth_client.resolve_user_id, token)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


async def require_actor(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> Actor:
    """Build the caller context from the authenticated user's profile."""
    container: AppContainer = request.app.state.container
    return await container.profile_service.resolve_actor(user_id)


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
