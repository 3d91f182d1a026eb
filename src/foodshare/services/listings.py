"""Listing creation, validation and discovery."""

import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

from foodshare.domain.listings import (
    FoodType,
    Listing,
    ListingDraft,
    ListingFilters,
    ListingStatus,
    NearbyListing,
    Urgency,
)
from foodshare.domain.profiles import Actor
from foodshare.exceptions import NotAuthorizedError, NotFoundError, ValidationError
from foodshare.services.store import StoreCaller, utcnow

EARTH_RADIUS_KM = 6371.0
HIGH_URGENCY_WINDOW = timedelta(hours=24)
MEDIUM_URGENCY_WINDOW = timedelta(hours=72)
MAX_NEARBY_RADIUS_KM = 200.0


class ListingRepository(Protocol):
    """Persistence interface for donation listings."""

    def create_listing(self, donor_id: UUID, draft: ListingDraft) -> Listing:
        """Insert a new available listing and return it."""

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""

    def list_available(self, filters: ListingFilters, now: datetime) -> list[Listing]:
        """Return available listings not yet expired at ``now``, newest first."""

    def list_for_donor(self, donor_id: UUID) -> list[Listing]:
        """Return a donor's listings, newest first."""

    def list_expiring(
        self, statuses: list[ListingStatus], before: datetime
    ) -> list[Listing]:
        """Return listings in ``statuses`` whose expiry is at or before ``before``."""

    def update_status(
        self,
        listing_id: UUID,
        expected_status: ListingStatus,
        new_status: ListingStatus,
    ) -> bool:
        """Set a new status only if the current one matches ``expected_status``."""


@dataclass
class ListingService:
    """Service for publishing and browsing donation listings."""

    repository: ListingRepository
    call_store: StoreCaller = field(default_factory=StoreCaller)
    clock: Callable[[], datetime] = utcnow

    async def create_listing(self, draft: ListingDraft, actor: Actor) -> Listing:
        """Validate a donor's draft and store it as an available listing."""
        if not actor.is_donor:
            raise NotAuthorizedError("Only donors can publish listings")
        validate_draft(draft, self.clock())
        return await self.call_store(
            self.repository.create_listing, actor.user_id, draft
        )

    async def get_listing(self, listing_id: UUID) -> Listing:
        """Return a listing with its effective status at the current time."""
        listing = await self.call_store(self.repository.get_listing, listing_id)
        if listing is None:
            raise NotFoundError("Listing", listing_id)
        return effective_listing(listing, self.clock())

    async def list_available(self, filters: ListingFilters) -> list[Listing]:
        """Return claimable listings matching the filters."""
        return await self.call_store(
            self.repository.list_available, filters, self.clock()
        )

    async def list_for_donor(self, donor_id: UUID) -> list[Listing]:
        """Return all listings published by a donor."""
        now = self.clock()
        listings = await self.call_store(self.repository.list_for_donor, donor_id)
        return [effective_listing(listing, now) for listing in listings]

    async def find_nearby(  # noqa: PLR0913
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 10.0,
        food_type: FoodType | None = None,
        urgency: Urgency | None = None,
        limit: int = 100,
    ) -> list[NearbyListing]:
        """Return available listings within ``radius_km``, closest first."""
        errors = _coordinate_errors(latitude, longitude)
        if radius_km <= 0 or radius_km > MAX_NEARBY_RADIUS_KM:
            errors.append(f"radius_km must be in (0, {MAX_NEARBY_RADIUS_KM:g}]")
        if errors:
            raise ValidationError(errors)

        now = self.clock()
        listings = await self.call_store(
            self.repository.list_available,
            ListingFilters(food_type=food_type, limit=limit),
            now,
        )
        nearby = []
        for listing in listings:
            distance = haversine_km(
                latitude, longitude, listing.latitude, listing.longitude
            )
            if distance > radius_km:
                continue
            listing_urgency = classify_urgency(listing.expires_at, now)
            if urgency is not None and listing_urgency is not urgency:
                continue
            nearby.append(
                NearbyListing(
                    listing=listing,
                    distance_km=round(distance, 3),
                    urgency=listing_urgency,
                )
            )
        nearby.sort(key=lambda entry: entry.distance_km)
        return nearby


def validate_draft(draft: ListingDraft, now: datetime) -> None:
    """Raise ValidationError listing every problem with the draft."""
    errors = []
    if not draft.food_name.strip():
        errors.append("food_name must not be empty")
    if not math.isfinite(draft.quantity) or draft.quantity <= 0:
        errors.append("quantity must be a positive number")
    if not draft.quantity_unit.strip():
        errors.append("quantity_unit must not be empty")
    if draft.food_type not in {food_type.value for food_type in FoodType}:
        errors.append(f"food_type {draft.food_type!r} is not supported")
    errors.extend(_coordinate_errors(draft.latitude, draft.longitude))
    if draft.expires_at.tzinfo is None:
        errors.append("expires_at must include a timezone")
    elif draft.expires_at <= now:
        errors.append("expires_at must be in the future")
    if errors:
        raise ValidationError(errors)


def effective_listing(listing: Listing, now: datetime) -> Listing:
    """Present an unswept listing past its expiry as expired."""
    if listing.status is ListingStatus.AVAILABLE and listing.is_expired(now):
        return replace(listing, status=ListingStatus.EXPIRED)
    return listing


def classify_urgency(expires_at: datetime, now: datetime) -> Urgency:
    """Bucket the time left before expiry."""
    remaining = expires_at - now
    if remaining < HIGH_URGENCY_WINDOW:
        return Urgency.HIGH
    if remaining < MEDIUM_URGENCY_WINDOW:
        return Urgency.MEDIUM
    return Urgency.LOW


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _coordinate_errors(latitude: float, longitude: float) -> list[str]:
    errors = []
    if not -90 <= latitude <= 90:  # noqa: PLR2004
        errors.append("latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:  # noqa: PLR2004
        errors.append("longitude must be between -180 and 180")
    return errors
