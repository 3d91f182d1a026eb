"""Lifecycle events emitted by the reservation workflow."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from foodshare.domain.claims import ClaimStatus
from foodshare.domain.listings import ListingStatus


@dataclass(frozen=True)
class ListingStatusChanged:
    """A listing moved between lifecycle states."""

    listing_id: UUID
    donor_id: UUID
    old_status: ListingStatus
    new_status: ListingStatus
    occurred_at: datetime

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "listing-status-changed",
            "listing_id": str(self.listing_id),
            "donor_id": str(self.donor_id),
            "old_status": self.old_status.value,
            "new_status": self.new_status.value,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ClaimStatusChanged:
    """A claim moved between ledger states."""

    claim_id: UUID
    listing_id: UUID
    recipient_id: UUID
    old_status: ClaimStatus | None
    new_status: ClaimStatus
    occurred_at: datetime

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "claim-status-changed",
            "claim_id": str(self.claim_id),
            "listing_id": str(self.listing_id),
            "recipient_id": str(self.recipient_id),
            "old_status": self.old_status.value if self.old_status else None,
            "new_status": self.new_status.value,
            "occurred_at": self.occurred_at.isoformat(),
        }


LifecycleEvent = ListingStatusChanged | ClaimStatusChanged
