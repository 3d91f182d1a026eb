"""Supabase-backed listing repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from foodshare.adapters.supabase_rows import parse_timestamp
from foodshare.domain.listings import (
    FoodType,
    Listing,
    ListingDraft,
    ListingFilters,
    ListingStatus,
)
from foodshare.services.listings import ListingRepository

_COLUMNS = (
    "id, donor_id, food_name, quantity, quantity_unit, food_type, description, "
    "image_url, latitude, longitude, expires_at, status, created_at"
)


@dataclass
class SupabaseListingRepository(ListingRepository):
    """Supabase implementation for donation listings."""

    client: Client

    def create_listing(self, donor_id: UUID, draft: ListingDraft) -> Listing:
        """Insert a listing row and return it."""
        response = (
            self.client.table("donations")
            .insert(
                {
                    "donor_id": str(donor_id),
                    "food_name": draft.food_name.strip(),
                    "quantity": draft.quantity,
                    "quantity_unit": draft.quantity_unit.strip(),
                    "food_type": draft.food_type,
                    "description": draft.description,
                    "image_url": draft.image_url,
                    "latitude": draft.latitude,
                    "longitude": draft.longitude,
                    "expires_at": draft.expires_at.isoformat(),
                    "status": ListingStatus.AVAILABLE.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create listing")
        return _parse_listing(response.data[0])

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""
        response = (
            self.client.table("donations")
            .select(_COLUMNS)
            .eq("id", str(listing_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_listing(response.data[0])

    def list_available(self, filters: ListingFilters, now: datetime) -> list[Listing]:
        """Return available, unexpired listings, newest first."""
        query = (
            self.client.table("donations")
            .select(_COLUMNS)
            .eq("status", ListingStatus.AVAILABLE.value)
            .gt("expires_at", now.isoformat())
        )
        if filters.food_type is not None:
            query = query.eq("food_type", filters.food_type.value)
        if filters.donor_id is not None:
            query = query.eq("donor_id", str(filters.donor_id))
        response = query.order("created_at", desc=True).limit(filters.limit).execute()
        return [_parse_listing(row) for row in response.data or []]

    def list_for_donor(self, donor_id: UUID) -> list[Listing]:
        """Return every listing a donor has published."""
        response = (
            self.client.table("donations")
            .select(_COLUMNS)
            .eq("donor_id", str(donor_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_listing(row) for row in response.data or []]

    def list_expiring(
        self, statuses: list[ListingStatus], before: datetime
    ) -> list[Listing]:
        """Return listings in the given statuses expiring at or before a time."""
        response = (
            self.client.table("donations")
            .select(_COLUMNS)
            .in_("status", [status.value for status in statuses])
            .lte("expires_at", before.isoformat())
            .execute()
        )
        return [_parse_listing(row) for row in response.data or []]

    def update_status(
        self,
        listing_id: UUID,
        expected_status: ListingStatus,
        new_status: ListingStatus,
    ) -> bool:
        """Conditionally update the status; True if a row matched."""
        response = (
            self.client.table("donations")
            .update(
                {
                    "status": new_status.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(listing_id))
            .eq("status", expected_status.value)
            .execute()
        )
        return bool(response.data)


def _parse_listing(row: dict[str, object]) -> Listing:
    return Listing(
        id=UUID(str(row["id"])),
        donor_id=UUID(str(row["donor_id"])),
        food_name=str(row.get("food_name", "")),
        quantity=float(row.get("quantity", 0.0)),
        quantity_unit=str(row.get("quantity_unit", "")),
        food_type=FoodType(row.get("food_type", FoodType.OTHER.value)),
        description=str(row.get("description") or ""),
        image_url=row.get("image_url"),
        latitude=float(row.get("latitude", 0.0)),
        longitude=float(row.get("longitude", 0.0)),
        expires_at=parse_timestamp(row.get("expires_at")),
        status=ListingStatus(row["status"]),
        created_at=parse_timestamp(row.get("created_at")),
    )
