"""Rewards service for points, badges and the leaderboard."""

from dataclasses import dataclass, field
from uuid import UUID

from foodshare.domain.profiles import AccountType, Profile
from foodshare.domain.rewards import (
    MONTHLY_REWARDS,
    Badge,
    LeaderboardEntry,
    RewardStatus,
)
from foodshare.exceptions import NotFoundError
from foodshare.services.profiles import ProfileRepository
from foodshare.services.store import StoreCaller

COMMUNITY_HERO_DONATIONS = 50


@dataclass
class RewardsService:
    """Service for gamified rewards derived from profile counters."""

    repository: ProfileRepository
    call_store: StoreCaller = field(default_factory=StoreCaller)
    leaderboard_size: int = 10

    async def leaderboard(self, limit: int | None = None) -> list[LeaderboardEntry]:
        """Return the top profiles by points."""
        profiles = await self.call_store(
            self.repository.list_top_by_points, limit or self.leaderboard_size
        )
        return [
            LeaderboardEntry(
                rank=index,
                profile_id=profile.id,
                full_name=profile.full_name,
                total_points=profile.total_points,
                total_donations=profile.total_donations,
            )
            for index, profile in enumerate(profiles, start=1)
        ]

    async def badges(self, profile_id: UUID) -> list[Badge]:
        """Return the badges for a profile with unlock state and progress."""
        profile = await self._get_profile(profile_id)
        board = await self.leaderboard()
        on_board = profile.total_points > 0 and any(
            entry.profile_id == profile_id for entry in board
        )
        if profile.account_type is AccountType.RECIPIENT:
            return [
                Badge(
                    id="first-claim",
                    name="First Pickup",
                    description="Receive your first food donation",
                    unlocked=profile.total_claims >= 1,
                ),
                _top_contributor(on_board),
            ]
        return [
            Badge(
                id="first-donation",
                name="First Time Donor",
                description="Complete your first food donation",
                unlocked=profile.total_donations >= 1,
            ),
            Badge(
                id="community-hero",
                name="Community Hero",
                description=f"Complete {COMMUNITY_HERO_DONATIONS} successful donations",
                unlocked=profile.total_donations >= COMMUNITY_HERO_DONATIONS,
                progress=min(profile.total_donations, COMMUNITY_HERO_DONATIONS),
                target=COMMUNITY_HERO_DONATIONS,
            ),
            _top_contributor(on_board),
        ]

    async def rewards(self, profile_id: UUID) -> list[RewardStatus]:
        """Return the reward catalogue with eligibility for a profile."""
        profile = await self._get_profile(profile_id)
        return [
            RewardStatus(
                reward=reward,
                eligible=profile.total_points >= reward.required_points,
                points_missing=max(reward.required_points - profile.total_points, 0),
            )
            for reward in MONTHLY_REWARDS
        ]

    async def _get_profile(self, profile_id: UUID) -> Profile:
        profile = await self.call_store(self.repository.get_profile, profile_id)
        if profile is None:
            raise NotFoundError("Profile", profile_id)
        return profile


def _top_contributor(on_board: bool) -> Badge:
    return Badge(
        id="top-contributor",
        name="Top Contributor",
        description="Be among the top contributors on the leaderboard",
        unlocked=on_board,
    )
