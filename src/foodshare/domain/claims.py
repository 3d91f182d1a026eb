"""Domain models for claims against listings."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ClaimStatus(StrEnum):
    """Claim states recorded in the ledger."""

    REQUESTED = "requested"
    ACTIVE = "active"
    RELEASED = "released"
    REJECTED = "rejected"


class ReleaseReason(StrEnum):
    """Why an active claim is being let go."""

    WITHDRAWN = "withdrawn"
    REJECTED = "rejected"

    @property
    def claim_status(self) -> ClaimStatus:
        """Return the claim status this reason resolves to."""
        if self is ReleaseReason.WITHDRAWN:
            return ClaimStatus.RELEASED
        return ClaimStatus.REJECTED


@dataclass(frozen=True)
class Claim:
    """Represents a recipient's claim on a listing."""

    id: UUID
    listing_id: UUID
    recipient_id: UUID
    status: ClaimStatus
    created_at: datetime


@dataclass(frozen=True)
class ExpiredListing:
    """Outcome of expiring one listing: its active claim, if any, was rejected."""

    listing_id: UUID
    rejected_claim_id: UUID | None = None
    recipient_id: UUID | None = None
