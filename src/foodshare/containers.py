"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from foodshare.adapters.supabase_auth_client import AuthClient, SupabaseAuthClient
from foodshare.adapters.supabase_claim_ledger import SupabaseClaimLedger
from foodshare.adapters.supabase_listing_repository import SupabaseListingRepository
from foodshare.adapters.supabase_profile_repository import SupabaseProfileRepository
from foodshare.adapters.webhook_notifier import HttpxWebhookNotifier
from foodshare.config import Settings
from foodshare.services.expiry import ExpirySweeper
from foodshare.services.listings import ListingService
from foodshare.services.notifications import (
    BackgroundNotifier,
    LoggingNotifier,
    Notifier,
)
from foodshare.services.profiles import ProfileService
from foodshare.services.reservations import ReservationService
from foodshare.services.rewards import RewardsService
from foodshare.services.store import StoreCaller


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    call_store: StoreCaller
    auth_client: AuthClient
    notifier: Notifier
    profile_service: ProfileService
    listing_service: ListingService
    reservation_service: ReservationService
    rewards_service: RewardsService
    expiry_sweeper: ExpirySweeper
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    # PostgREST requests are bounded in the client so a call abandoned by
    # StoreCaller does not keep its worker thread busy.
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.store_timeout_seconds
        ),
    )
    call_store = StoreCaller(timeout_seconds=resolved_settings.store_timeout_seconds)
    listing_repository = SupabaseListingRepository(supabase_client)
    claim_ledger = SupabaseClaimLedger(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)

    webhook_notifier: HttpxWebhookNotifier | None = None
    background_notifier: BackgroundNotifier | None = None
    notifier: Notifier
    if resolved_settings.notifier_webhook_url:
        webhook_notifier = HttpxWebhookNotifier.create(
            resolved_settings.notifier_webhook_url
        )
        background_notifier = BackgroundNotifier(webhook_notifier)
        notifier = background_notifier
    else:
        notifier = LoggingNotifier()

    reservation_service = ReservationService(
        listing_repository=listing_repository,
        claim_ledger=claim_ledger,
        profile_repository=profile_repository,
        notifier=notifier,
        call_store=call_store,
        donor_points=resolved_settings.donor_points_per_donation,
        recipient_points=resolved_settings.recipient_points_per_claim,
    )
    expiry_sweeper = ExpirySweeper(
        reservation_service=reservation_service,
        interval_seconds=resolved_settings.expiry_sweep_interval_seconds,
    )

    async def close_resources() -> None:
        expiry_sweeper.stop()
        if background_notifier is not None:
            await background_notifier.drain()
        if webhook_notifier is not None:
            await webhook_notifier.close()

    return AppContainer(
        settings=resolved_settings,
        call_store=call_store,
        auth_client=SupabaseAuthClient(supabase_client),
        notifier=notifier,
        profile_service=ProfileService(profile_repository, call_store),
        listing_service=ListingService(listing_repository, call_store),
        reservation_service=reservation_service,
        rewards_service=RewardsService(
            profile_repository,
            call_store,
            leaderboard_size=resolved_settings.leaderboard_size,
        ),
        expiry_sweeper=expiry_sweeper,
        close_resources=close_resources,
    )
