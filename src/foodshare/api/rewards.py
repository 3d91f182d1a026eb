"""Profile and rewards endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from foodshare.api.auth import require_actor, require_user_id
from foodshare.api.schemas import (
    ProfileCreate,
    serialize_badge,
    serialize_leaderboard_entry,
    serialize_profile,
    serialize_reward,
)
from foodshare.domain.profiles import Actor  # noqa: TC001

if TYPE_CHECKING:
    from foodshare.containers import AppContainer

router = APIRouter(tags=["rewards"])


@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def register_profile(
    payload: ProfileCreate,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Create the caller's profile after sign-up."""
    container: AppContainer = request.app.state.container
    profile = await container.profile_service.register(
        user_id=user_id,
        email=payload.email,
        full_name=payload.full_name,
        account_type=payload.account_type,
    )
    return serialize_profile(profile)


@router.get("/profiles/me")
async def my_profile(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the caller's profile."""
    container: AppContainer = request.app.state.container
    profile = await container.profile_service.get_profile(user_id)
    return serialize_profile(profile)


@router.get("/rewards/leaderboard")
async def leaderboard(
    request: Request, limit: int | None = Query(default=None, ge=1, le=100)
) -> dict[str, object]:
    """Return the top contributors by points."""
    container: AppContainer = request.app.state.container
    entries = await container.rewards_service.leaderboard(limit)
    return {"leaderboard": [serialize_leaderboard_entry(entry) for entry in entries]}


@router.get("/rewards/me")
async def my_rewards(
    request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Return the caller's points, badges and redeemable rewards."""
    container: AppContainer = request.app.state.container
    profile = await container.profile_service.get_profile(actor.user_id)
    badges = await container.rewards_service.badges(actor.user_id)
    rewards = await container.rewards_service.rewards(actor.user_id)
    return {
        "total_points": profile.total_points,
        "badges": [serialize_badge(badge) for badge in badges],
        "rewards": [serialize_reward(reward) for reward in rewards],
    }
