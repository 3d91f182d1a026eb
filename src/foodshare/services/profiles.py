"""Profile lookup, registration and reward counters."""

from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from foodshare.domain.profiles import AccountType, Actor, Profile
from foodshare.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from foodshare.services.store import StoreCaller


class ProfileRepository(Protocol):
    """Persistence interface for profiles and their counters."""

    def create_profile(self, profile: Profile) -> Profile | None:
        """Insert a profile row; None when the id is already registered."""

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return a profile by id, if present."""

    def increment_donation_count(self, profile_id: UUID) -> None:
        """Add one completed donation to the profile."""

    def increment_claim_count(self, profile_id: UUID) -> None:
        """Add one completed claim to the profile."""

    def increment_points(self, profile_id: UUID, amount: int) -> None:
        """Add reward points to the profile."""

    def list_top_by_points(self, limit: int) -> list[Profile]:
        """Return profiles ordered by points, highest first."""


@dataclass
class ProfileService:
    """Application service for profile lifecycle actions."""

    repository: ProfileRepository
    call_store: StoreCaller = field(default_factory=StoreCaller)

    async def register(
        self,
        user_id: UUID,
        email: str,
        full_name: str,
        account_type: AccountType,
    ) -> Profile:
        """Create the profile row for a newly signed-up user."""
        errors = []
        if not full_name.strip():
            errors.append("full_name must not be empty")
        if "@" not in email:
            errors.append("email is not valid")
        if errors:
            raise ValidationError(errors)
        profile = Profile(
            id=user_id,
            email=email.strip(),
            full_name=full_name.strip(),
            account_type=account_type,
            total_points=0,
            total_donations=0,
            total_claims=0,
        )
        created = await self.call_store(self.repository.create_profile, profile)
        if created is None:
            raise AlreadyExistsError("Profile", user_id)
        return created

    async def get_profile(self, user_id: UUID) -> Profile:
        """Return a profile or raise NotFoundError."""
        profile = await self.call_store(self.repository.get_profile, user_id)
        if profile is None:
            raise NotFoundError("Profile", user_id)
        return profile

    async def resolve_actor(self, user_id: UUID) -> Actor:
        """Build the caller context for an authenticated user."""
        profile = await self.get_profile(user_id)
        return Actor(user_id=profile.id, account_type=profile.account_type)
