"""Reservation state machine for donation listings.

A listing moves ``available -> reserved -> claimed``, with side exits to
``expired`` (time-driven), back to ``available`` (claim released or
rejected) and to ``cancelled`` (donor withdraws). Transitions that change a
claim and its listing together go through one ledger call that commits both
rows or neither; single-row transitions are a compare-and-swap on the
listing status. Neither relies on a prior read, so concurrent requests on
one listing produce exactly one active claim.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

from foodshare.domain.claims import Claim, ClaimStatus, ReleaseReason
from foodshare.domain.events import (
    ClaimStatusChanged,
    LifecycleEvent,
    ListingStatusChanged,
)
from foodshare.domain.listings import Listing, ListingStatus
from foodshare.domain.profiles import Actor
from foodshare.exceptions import (
    AlreadyReservedError,
    ExpiredError,
    InvalidStateError,
    NotAuthorizedError,
    NotFoundError,
)
from foodshare.services.claims import ClaimLedger
from foodshare.services.listings import ListingRepository
from foodshare.services.notifications import Notifier
from foodshare.services.profiles import ProfileRepository
from foodshare.services.store import StoreCaller, utcnow

logger = logging.getLogger(__name__)

_SWEEPABLE = [ListingStatus.AVAILABLE, ListingStatus.RESERVED]


@dataclass
class ReservationService:
    """Drives claims through the listing lifecycle."""

    listing_repository: ListingRepository
    claim_ledger: ClaimLedger
    profile_repository: ProfileRepository
    notifier: Notifier
    call_store: StoreCaller = field(default_factory=StoreCaller)
    donor_points: int = 50
    recipient_points: int = 10
    clock: Callable[[], datetime] = utcnow

    async def request_claim(self, listing_id: UUID, actor: Actor) -> Claim:
        """Reserve an available listing for a recipient.

        Retrying after a timeout is safe: if the earlier attempt committed, the
        recipient's existing active claim is returned.
        """
        if not actor.is_recipient:
            raise NotAuthorizedError("Only recipients can claim donations")
        listing = await self._get_listing(listing_id)
        if listing.donor_id == actor.user_id:
            raise NotAuthorizedError("Donors cannot claim their own listings")
        now = self.clock()
        if listing.status is ListingStatus.RESERVED and not listing.is_expired(now):
            held = await self._held_by(listing_id, actor)
            if held is not None:
                return held
        _ensure_claimable(listing, now)

        claim = await self.call_store(
            self.claim_ledger.reserve_listing, listing_id, actor.user_id
        )
        if claim is None:
            current = await self._get_listing(listing_id)
            if current.status is ListingStatus.RESERVED and not current.is_expired(now):
                held = await self._held_by(listing_id, actor)
                if held is not None:
                    return held
            _ensure_claimable(current, now)
            raise AlreadyReservedError(listing_id)

        logger.info(
            "Listing reserved",
            extra={"listing_id": str(listing_id), "claim_id": str(claim.id)},
        )
        await self._emit(
            ClaimStatusChanged(
                claim_id=claim.id,
                listing_id=listing_id,
                recipient_id=claim.recipient_id,
                old_status=None,
                new_status=ClaimStatus.ACTIVE,
                occurred_at=now,
            )
        )
        await self._emit(
            _listing_event(listing, ListingStatus.RESERVED, now),
        )
        return claim

    async def confirm_claim(self, claim_id: UUID, actor: Actor) -> Listing:
        """Mark a reserved listing as handed over and award points.

        The claim stays ``active`` as the audit record of who received it.
        """
        claim = await self._get_claim(claim_id)
        listing = await self._get_listing(claim.listing_id)
        if listing.donor_id != actor.user_id:
            raise NotAuthorizedError("Only the donor can confirm a claim")
        if claim.status is not ClaimStatus.ACTIVE:
            raise InvalidStateError(f"Claim {claim_id} is {claim.status.value}")
        if listing.status is not ListingStatus.RESERVED:
            raise InvalidStateError(f"Listing {listing.id} is {listing.status.value}")

        swapped = await self.call_store(
            self.listing_repository.update_status,
            listing.id,
            ListingStatus.RESERVED,
            ListingStatus.CLAIMED,
        )
        if not swapped:
            raise InvalidStateError(f"Listing {listing.id} is no longer reserved")

        now = self.clock()
        logger.info(
            "Claim confirmed",
            extra={"listing_id": str(listing.id), "claim_id": str(claim_id)},
        )
        await self._emit(_listing_event(listing, ListingStatus.CLAIMED, now))
        await self._award(listing.donor_id, claim.recipient_id)
        return replace(listing, status=ListingStatus.CLAIMED)

    async def release_claim(
        self, claim_id: UUID, reason: ReleaseReason, actor: Actor
    ) -> Claim:
        """Let go of an active claim and put the listing back on offer."""
        claim = await self._get_claim(claim_id)
        listing = await self._get_listing(claim.listing_id)
        if reason is ReleaseReason.WITHDRAWN and actor.user_id != claim.recipient_id:
            raise NotAuthorizedError("Only the recipient can withdraw a claim")
        if reason is ReleaseReason.REJECTED and actor.user_id != listing.donor_id:
            raise NotAuthorizedError("Only the donor can reject a claim")
        if claim.status is not ClaimStatus.ACTIVE:
            raise InvalidStateError(f"Claim {claim_id} is {claim.status.value}")
        if listing.status is ListingStatus.CLAIMED:
            raise InvalidStateError(f"Listing {listing.id} was already handed over")

        new_status = reason.claim_status
        now = self.clock()
        expired = listing.is_expired(now)
        target = ListingStatus.EXPIRED if expired else ListingStatus.AVAILABLE
        listing_status = await self.call_store(
            self.claim_ledger.release_claim, claim_id, new_status, target
        )
        if listing_status is None:
            raise InvalidStateError(f"Claim {claim_id} is no longer active")

        await self._emit(
            ClaimStatusChanged(
                claim_id=claim_id,
                listing_id=listing.id,
                recipient_id=claim.recipient_id,
                old_status=ClaimStatus.ACTIVE,
                new_status=new_status,
                occurred_at=now,
            )
        )
        if listing.status is ListingStatus.RESERVED and listing_status is target:
            await self._emit(_listing_event(listing, target, now))
        return replace(claim, status=new_status)

    async def cancel_listing(self, listing_id: UUID, actor: Actor) -> Listing:
        """Withdraw an available listing."""
        listing = await self._get_listing(listing_id)
        if listing.donor_id != actor.user_id:
            raise NotAuthorizedError("Only the donor can cancel a listing")
        if listing.status is not ListingStatus.AVAILABLE:
            raise InvalidStateError(f"Listing {listing_id} is {listing.status.value}")
        swapped = await self.call_store(
            self.listing_repository.update_status,
            listing_id,
            ListingStatus.AVAILABLE,
            ListingStatus.CANCELLED,
        )
        if not swapped:
            raise InvalidStateError(f"Listing {listing_id} is no longer available")
        await self._emit(_listing_event(listing, ListingStatus.CANCELLED, self.clock()))
        return replace(listing, status=ListingStatus.CANCELLED)

    async def expire_listings(self, now: datetime | None = None) -> list[UUID]:
        """Expire every available or reserved listing past its expiry.

        Each listing and its active claim change in one ledger transaction, so
        a failed call leaves both untouched for the next sweep. Claimed
        listings are never touched, and running the sweep twice is a no-op the
        second time.
        """
        now = now or self.clock()
        candidates = await self.call_store(
            self.listing_repository.list_expiring, _SWEEPABLE, now
        )
        expired: list[UUID] = []
        for listing in candidates:
            if listing.status not in _SWEEPABLE or not listing.is_expired(now):
                continue
            outcome = await self.call_store(
                self.claim_ledger.expire_listing, listing.id, listing.status, now
            )
            if outcome is None:
                continue
            expired.append(listing.id)
            await self._emit(_listing_event(listing, ListingStatus.EXPIRED, now))
            if outcome.rejected_claim_id is not None and outcome.recipient_id:
                await self._emit(
                    ClaimStatusChanged(
                        claim_id=outcome.rejected_claim_id,
                        listing_id=listing.id,
                        recipient_id=outcome.recipient_id,
                        old_status=ClaimStatus.ACTIVE,
                        new_status=ClaimStatus.REJECTED,
                        occurred_at=now,
                    )
                )
        if expired:
            logger.info("Expired listings", extra={"count": len(expired)})
        return expired

    async def list_claims_for(self, actor: Actor) -> list[Claim]:
        """Return the caller's claims, newest first."""
        return await self.call_store(
            self.claim_ledger.list_for_recipient, actor.user_id
        )

    async def _get_listing(self, listing_id: UUID) -> Listing:
        listing = await self.call_store(
            self.listing_repository.get_listing, listing_id
        )
        if listing is None:
            raise NotFoundError("Listing", listing_id)
        return listing

    async def _get_claim(self, claim_id: UUID) -> Claim:
        claim = await self.call_store(self.claim_ledger.get_claim, claim_id)
        if claim is None:
            raise NotFoundError("Claim", claim_id)
        return claim

    async def _held_by(self, listing_id: UUID, actor: Actor) -> Claim | None:
        """Return the listing's active claim if the actor already holds it."""
        claim = await self.call_store(self.claim_ledger.active_claim_for, listing_id)
        if claim is not None and claim.recipient_id == actor.user_id:
            return claim
        return None

    async def _award(self, donor_id: UUID, recipient_id: UUID) -> None:
        """Apply each counter update on its own; one failure skips only itself."""
        repository = self.profile_repository
        steps = (
            (repository.increment_donation_count, donor_id, ()),
            (repository.increment_points, donor_id, (self.donor_points,)),
            (repository.increment_claim_count, recipient_id, ()),
            (repository.increment_points, recipient_id, (self.recipient_points,)),
        )
        for func, profile_id, extra_args in steps:
            try:
                await self.call_store(func, profile_id, *extra_args)
            except Exception:
                logger.exception(
                    "Failed to update profile counters",
                    extra={"step": func.__name__, "profile_id": str(profile_id)},
                )

    async def _emit(self, event: LifecycleEvent) -> None:
        try:
            await self.notifier.notify(event)
        except Exception:
            logger.exception("Failed to deliver lifecycle event")


def _ensure_claimable(listing: Listing, now: datetime) -> None:
    if listing.status is ListingStatus.EXPIRED or (
        listing.status in _SWEEPABLE and listing.is_expired(now)
    ):
        raise ExpiredError(listing.id)
    if listing.status is ListingStatus.RESERVED:
        raise AlreadyReservedError(listing.id)
    if listing.status is not ListingStatus.AVAILABLE:
        raise InvalidStateError(f"Listing {listing.id} is {listing.status.value}")


def _listing_event(
    listing: Listing, new_status: ListingStatus, now: datetime
) -> ListingStatusChanged:
    return ListingStatusChanged(
        listing_id=listing.id,
        donor_id=listing.donor_id,
        old_status=listing.status,
        new_status=new_status,
        occurred_at=now,
    )
