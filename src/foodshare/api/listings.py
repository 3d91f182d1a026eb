"""Listing and claim endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from foodshare.api.auth import require_actor
from foodshare.api.schemas import (
    ClaimRelease,
    ListingCreate,
    serialize_claim,
    serialize_listing,
    serialize_nearby,
)
from foodshare.domain.listings import FoodType, ListingFilters, Urgency
from foodshare.domain.profiles import Actor  # noqa: TC001

if TYPE_CHECKING:
    from foodshare.containers import AppContainer

router = APIRouter(tags=["listings"])


@router.post("/listings", status_code=status.HTTP_201_CREATED)
async def create_listing(
    payload: ListingCreate, request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Publish a new donation."""
    container: AppContainer = request.app.state.container
    listing = await container.listing_service.create_listing(
        payload.to_draft(), actor
    )
    return serialize_listing(listing)


@router.get("/listings")
async def list_listings(
    request: Request,
    food_type: FoodType | None = None,
    donor_id: UUID | None = None,
    limit: int = Query(default=50, ge=1, le=200),
) -> dict[str, object]:
    """Return claimable listings, newest first."""
    container: AppContainer = request.app.state.container
    listings = await container.listing_service.list_available(
        ListingFilters(food_type=food_type, donor_id=donor_id, limit=limit)
    )
    return {"listings": [serialize_listing(listing) for listing in listings]}


@router.get("/listings/nearby")
async def nearby_listings(  # noqa: PLR0913
    request: Request,
    latitude: float,
    longitude: float,
    radius_km: float = 10.0,
    food_type: FoodType | None = None,
    urgency: Urgency | None = None,
) -> dict[str, object]:
    """Return claimable listings around a point for the map view."""
    container: AppContainer = request.app.state.container
    nearby = await container.listing_service.find_nearby(
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        food_type=food_type,
        urgency=urgency,
    )
    return {"listings": [serialize_nearby(entry) for entry in nearby]}


@router.get("/listings/mine")
async def my_listings(
    request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Return every listing the caller has published."""
    container: AppContainer = request.app.state.container
    listings = await container.listing_service.list_for_donor(actor.user_id)
    return {"listings": [serialize_listing(listing) for listing in listings]}


@router.get("/listings/{listing_id}")
async def get_listing(listing_id: UUID, request: Request) -> dict[str, object]:
    """Return a single listing."""
    container: AppContainer = request.app.state.container
    listing = await container.listing_service.get_listing(listing_id)
    return serialize_listing(listing)


@router.post("/listings/{listing_id}/cancel")
async def cancel_listing(
    listing_id: UUID, request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Withdraw an available listing."""
    container: AppContainer = request.app.state.container
    listing = await container.reservation_service.cancel_listing(listing_id, actor)
    return serialize_listing(listing)


@router.post("/listings/{listing_id}/claims", status_code=status.HTTP_201_CREATED)
async def request_claim(
    listing_id: UUID, request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Reserve a listing for the calling recipient."""
    container: AppContainer = request.app.state.container
    claim = await container.reservation_service.request_claim(listing_id, actor)
    return serialize_claim(claim)


@router.get("/claims/mine")
async def my_claims(
    request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Return the caller's claims."""
    container: AppContainer = request.app.state.container
    claims = await container.reservation_service.list_claims_for(actor)
    return {"claims": [serialize_claim(claim) for claim in claims]}


@router.post("/claims/{claim_id}/confirm")
async def confirm_claim(
    claim_id: UUID, request: Request, actor: Actor = Depends(require_actor)
) -> dict[str, object]:
    """Confirm hand-over of a reserved listing."""
    container: AppContainer = request.app.state.container
    listing = await container.reservation_service.confirm_claim(claim_id, actor)
    return serialize_listing(listing)


@router.post("/claims/{claim_id}/release")
async def release_claim(
    claim_id: UUID,
    payload: ClaimRelease,
    request: Request,
    actor: Actor = Depends(require_actor),
) -> dict[str, object]:
    """Withdraw (recipient) or reject (donor) an active claim."""
    container: AppContainer = request.app.state.container
    claim = await container.reservation_service.release_claim(
        claim_id, payload.reason, actor
    )
    return serialize_claim(claim)
