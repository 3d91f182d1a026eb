"""Domain models for donation listings."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ListingStatus(StrEnum):
    """Lifecycle states of a donation listing."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    CLAIMED = "claimed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class FoodType(StrEnum):
    """Food categories a donor can choose from."""

    COOKED = "cooked"
    PACKAGED = "packaged"
    FRESH = "fresh"
    CANNED = "canned"
    OTHER = "other"


class Urgency(StrEnum):
    """How soon a listing needs to be picked up."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ListingDraft:
    """Donor input for a new listing, before validation."""

    food_name: str
    quantity: float
    quantity_unit: str
    food_type: str
    expires_at: datetime
    latitude: float
    longitude: float
    description: str = ""
    image_url: str | None = None


@dataclass(frozen=True)
class Listing:
    """Represents a donation listing stored in the database."""

    id: UUID
    donor_id: UUID
    food_name: str
    quantity: float
    quantity_unit: str
    food_type: FoodType
    description: str
    image_url: str | None
    latitude: float
    longitude: float
    expires_at: datetime
    status: ListingStatus
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return whether the listing's expiry is at or before ``now``."""
        return self.expires_at <= now


@dataclass(frozen=True)
class ListingFilters:
    """Optional filters for listing queries."""

    food_type: FoodType | None = None
    donor_id: UUID | None = None
    limit: int = 50


@dataclass(frozen=True)
class NearbyListing:
    """A listing annotated with its distance from a search point."""

    listing: Listing
    distance_km: float
    urgency: Urgency
