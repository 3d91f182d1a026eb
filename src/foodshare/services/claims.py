"""Claim ledger interface."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from foodshare.domain.claims import Claim, ClaimStatus, ExpiredListing
from foodshare.domain.listings import ListingStatus


class ClaimLedger(Protocol):
    """Persistence interface for claims.

    Implementations must make ``insert_if_none_active`` atomic with respect to
    other active claims on the same listing. ``reserve_listing``,
    ``release_claim`` and ``expire_listing`` change a claim and its listing
    together; either both writes commit or neither does.
    """

    def get_claim(self, claim_id: UUID) -> Claim | None:
        """Return a claim by id, if present."""

    def active_claim_for(self, listing_id: UUID) -> Claim | None:
        """Return the active claim on a listing, if any."""

    def insert_if_none_active(
        self, listing_id: UUID, recipient_id: UUID
    ) -> Claim | None:
        """Create an active claim, or return None if one already exists."""

    def update_status(
        self,
        claim_id: UUID,
        new_status: ClaimStatus,
        expected_status: ClaimStatus = ClaimStatus.ACTIVE,
    ) -> bool:
        """Move a claim to a new status if it is still in the expected one."""

    def list_for_recipient(self, recipient_id: UUID) -> list[Claim]:
        """Return a recipient's claims, newest first."""

    def reserve_listing(self, listing_id: UUID, recipient_id: UUID) -> Claim | None:
        """Insert an active claim and move the listing to ``reserved``.

        Returns None when the listing is not ``available`` or already has an
        active claim.
        """

    def release_claim(
        self,
        claim_id: UUID,
        claim_status: ClaimStatus,
        listing_status: ListingStatus,
    ) -> ListingStatus | None:
        """Retire an active claim and return a reserved listing to ``listing_status``.

        Returns the listing's status afterwards, or None when the claim was no
        longer active or the listing had been handed over.
        """

    def expire_listing(
        self, listing_id: UUID, expected_status: ListingStatus, now: datetime
    ) -> ExpiredListing | None:
        """Expire a listing still in ``expected_status`` and reject its active claim.

        Returns None when the listing had moved on or is not yet past expiry.
        """
