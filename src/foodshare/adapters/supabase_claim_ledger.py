"""Supabase-backed claim ledger.

At-most-one active claim per listing is enforced by the database through a
partial unique index on ``donation_claims (donation_id) where status =
'active'``; a conflicting insert fails with a unique violation instead
of racing a prior read. Transitions that touch a claim and its donation go
through the plpgsql functions in ``supabase/migrations`` so both rows change
in one transaction.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client, PostgrestAPIError

from foodshare.adapters.supabase_rows import UNIQUE_VIOLATION, parse_timestamp
from foodshare.domain.claims import Claim, ClaimStatus, ExpiredListing
from foodshare.domain.listings import ListingStatus
from foodshare.services.claims import ClaimLedger

_COLUMNS = "id, donation_id, recipient_id, status, created_at"


@dataclass
class SupabaseClaimLedger(ClaimLedger):
    """Supabase implementation for the claim ledger."""

    client: Client

    def get_claim(self, claim_id: UUID) -> Claim | None:
        """Return a claim by id, if present."""
        response = (
            self.client.table("donation_claims")
            .select(_COLUMNS)
            .eq("id", str(claim_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_claim(response.data[0])

    def active_claim_for(self, listing_id: UUID) -> Claim | None:
        """Return the active claim for a listing, if any."""
        response = (
            self.client.table("donation_claims")
            .select(_COLUMNS)
            .eq("donation_id", str(listing_id))
            .eq("status", ClaimStatus.ACTIVE.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_claim(response.data[0])

    def insert_if_none_active(
        self, listing_id: UUID, recipient_id: UUID
    ) -> Claim | None:
        """Insert an active claim; None when the unique index rejects it."""
        try:
            response = (
                self.client.table("donation_claims")
                .insert(
                    {
                        "donation_id": str(listing_id),
                        "recipient_id": str(recipient_id),
                        "status": ClaimStatus.ACTIVE.value,
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                return None
            raise
        if not response.data:
            raise RuntimeError("Failed to create claim")
        return _parse_claim(response.data[0])

    def update_status(
        self,
        claim_id: UUID,
        new_status: ClaimStatus,
        expected_status: ClaimStatus = ClaimStatus.ACTIVE,
    ) -> bool:
        """Conditionally update a claim's status; True if a row matched."""
        response = (
            self.client.table("donation_claims")
            .update(
                {
                    "status": new_status.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(claim_id))
            .eq("status", expected_status.value)
            .execute()
        )
        return bool(response.data)

    def list_for_recipient(self, recipient_id: UUID) -> list[Claim]:
        """Return a recipient's claims, newest first."""
        response = (
            self.client.table("donation_claims")
            .select(_COLUMNS)
            .eq("recipient_id", str(recipient_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_claim(row) for row in response.data or []]

    def reserve_listing(self, listing_id: UUID, recipient_id: UUID) -> Claim | None:
        """Run ``reserve_donation``: claim insert and listing update in one go."""
        response = self.client.rpc(
            "reserve_donation",
            {"p_donation_id": str(listing_id), "p_recipient_id": str(recipient_id)},
        ).execute()
        if not response.data:
            return None
        return _parse_claim(response.data[0])

    def release_claim(
        self,
        claim_id: UUID,
        claim_status: ClaimStatus,
        listing_status: ListingStatus,
    ) -> ListingStatus | None:
        """Run ``release_donation_claim`` and return the listing's new status."""
        response = self.client.rpc(
            "release_donation_claim",
            {
                "p_claim_id": str(claim_id),
                "p_claim_status": claim_status.value,
                "p_donation_status": listing_status.value,
            },
        ).execute()
        if not response.data:
            return None
        return ListingStatus(response.data)

    def expire_listing(
        self, listing_id: UUID, expected_status: ListingStatus, now: datetime
    ) -> ExpiredListing | None:
        """Run ``expire_donation``: listing expiry and claim rejection together."""
        response = self.client.rpc(
            "expire_donation",
            {
                "p_donation_id": str(listing_id),
                "p_expected_status": expected_status.value,
                "p_now": now.isoformat(),
            },
        ).execute()
        rows = response.data or []
        if not rows or not rows[0].get("expired"):
            return None
        row = rows[0]
        return ExpiredListing(
            listing_id=listing_id,
            rejected_claim_id=(
                UUID(str(row["claim_id"])) if row.get("claim_id") else None
            ),
            recipient_id=(
                UUID(str(row["recipient_id"])) if row.get("recipient_id") else None
            ),
        )


def _parse_claim(row: dict[str, object]) -> Claim:
    return Claim(
        id=UUID(str(row["id"])),
        listing_id=UUID(str(row["donation_id"])),
        recipient_id=UUID(str(row["recipient_id"])),
        status=ClaimStatus(row["status"]),
        created_at=parse_timestamp(row.get("created_at")),
    )
