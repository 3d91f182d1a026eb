"""Pydantic request models and response serializers for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel

from foodshare.domain.claims import Claim, ReleaseReason
from foodshare.domain.listings import Listing, ListingDraft, NearbyListing
from foodshare.domain.profiles import AccountType, Profile
from foodshare.domain.rewards import Badge, LeaderboardEntry, RewardStatus


class ProfileCreate(BaseModel):
    """Payload for registering the caller's profile."""

    email: str
    full_name: str
    account_type: AccountType


class ListingCreate(BaseModel):
    """Payload for publishing a donation."""

    food_name: str
    quantity: float
    quantity_unit: str
    food_type: str
    expires_at: datetime
    latitude: float
    longitude: float
    description: str = ""
    image_url: str | None = None

    def to_draft(self) -> ListingDraft:
        return ListingDraft(
            food_name=self.food_name,
            quantity=self.quantity,
            quantity_unit=self.quantity_unit,
            food_type=self.food_type,
            expires_at=self.expires_at,
            latitude=self.latitude,
            longitude=self.longitude,
            description=self.description,
            image_url=self.image_url,
        )


class ClaimRelease(BaseModel):
    """Payload for withdrawing or rejecting a claim."""

    reason: ReleaseReason


def serialize_listing(listing: Listing) -> dict[str, object]:
    return {
        "id": str(listing.id),
        "donor_id": str(listing.donor_id),
        "food_name": listing.food_name,
        "quantity": listing.quantity,
        "quantity_unit": listing.quantity_unit,
        "food_type": listing.food_type.value,
        "description": listing.description,
        "image_url": listing.image_url,
        "location": {"latitude": listing.latitude, "longitude": listing.longitude},
        "expires_at": listing.expires_at.isoformat(),
        "status": listing.status.value,
        "created_at": listing.created_at.isoformat(),
    }


def serialize_nearby(entry: NearbyListing) -> dict[str, object]:
    payload = serialize_listing(entry.listing)
    payload["distance_km"] = entry.distance_km
    payload["urgency"] = entry.urgency.value
    return payload


def serialize_claim(claim: Claim) -> dict[str, object]:
    return {
        "id": str(claim.id),
        "listing_id": str(claim.listing_id),
        "recipient_id": str(claim.recipient_id),
        "status": claim.status.value,
        "created_at": claim.created_at.isoformat(),
    }


def serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "id": str(profile.id),
        "email": profile.email,
        "full_name": profile.full_name,
        "account_type": profile.account_type.value,
        "total_points": profile.total_points,
        "total_donations": profile.total_donations,
        "total_claims": profile.total_claims,
    }


def serialize_leaderboard_entry(entry: LeaderboardEntry) -> dict[str, object]:
    return {
        "rank": entry.rank,
        "profile_id": str(entry.profile_id),
        "full_name": entry.full_name,
        "total_points": entry.total_points,
        "total_donations": entry.total_donations,
    }


def serialize_badge(badge: Badge) -> dict[str, object]:
    return {
        "id": badge.id,
        "name": badge.name,
        "description": badge.description,
        "unlocked": badge.unlocked,
        "progress": badge.progress,
        "target": badge.target,
    }


def serialize_reward(status: RewardStatus) -> dict[str, object]:
    return {
        "id": status.reward.id,
        "title": status.reward.title,
        "description": status.reward.description,
        "required_points": status.reward.required_points,
        "eligible": status.eligible,
        "points_missing": status.points_missing,
    }
