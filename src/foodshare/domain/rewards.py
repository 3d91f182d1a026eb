"""Domain models for points, badges and the leaderboard."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class LeaderboardEntry:
    """A ranked row on the points leaderboard."""

    rank: int
    profile_id: UUID
    full_name: str
    total_points: int
    total_donations: int


@dataclass(frozen=True)
class Badge:
    """An achievement with optional progress towards it."""

    id: str
    name: str
    description: str
    unlocked: bool
    progress: int | None = None
    target: int | None = None


@dataclass(frozen=True)
class MonthlyReward:
    """A reward redeemable once enough points are collected."""

    id: str
    title: str
    description: str
    required_points: int


@dataclass(frozen=True)
class RewardStatus:
    """A reward together with whether a profile can redeem it."""

    reward: MonthlyReward
    eligible: bool
    points_missing: int


MONTHLY_REWARDS: tuple[MonthlyReward, ...] = (
    MonthlyReward(
        id="match-tickets",
        title="Match Tickets",
        description="VIP tickets to a cricket match of your choice",
        required_points=2000,
    ),
    MonthlyReward(
        id="concert-passes",
        title="Concert Passes",
        description="Premium passes to upcoming concerts",
        required_points=1500,
    ),
    MonthlyReward(
        id="eco-gift",
        title="Eco-Friendly Gift Box",
        description="Curated box of sustainable products",
        required_points=1000,
    ),
    MonthlyReward(
        id="plant",
        title="Indoor Plant",
        description="Indoor plant for your space",
        required_points=500,
    ),
)
