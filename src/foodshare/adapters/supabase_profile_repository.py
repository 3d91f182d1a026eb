"""Supabase-backed profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client, PostgrestAPIError

from foodshare.adapters.supabase_rows import UNIQUE_VIOLATION
from foodshare.domain.profiles import AccountType, Profile
from foodshare.services.profiles import ProfileRepository

_COLUMNS = (
    "id, email, full_name, account_type, total_points, total_donations, total_claims"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles.

    Counters are bumped through RPC functions so each increment is a single
    ``update ... set x = x + n`` on the server.
    """

    client: Client

    def create_profile(self, profile: Profile) -> Profile | None:
        """Create a profile row; None when the id is already registered."""
        try:
            response = (
                self.client.table("profiles")
                .insert(
                    {
                        "id": str(profile.id),
                        "email": profile.email,
                        "full_name": profile.full_name,
                        "account_type": profile.account_type.value,
                        "total_points": profile.total_points,
                        "total_donations": profile.total_donations,
                        "total_claims": profile.total_claims,
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                return None
            raise
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return _parse_profile(response.data[0])

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return a profile by id, if present."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("id", str(profile_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def increment_donation_count(self, profile_id: UUID) -> None:
        """Add one to total_donations."""
        self._increment(profile_id, "total_donations", 1)

    def increment_claim_count(self, profile_id: UUID) -> None:
        """Add one to total_claims."""
        self._increment(profile_id, "total_claims", 1)

    def increment_points(self, profile_id: UUID, amount: int) -> None:
        """Add points to total_points."""
        self._increment(profile_id, "total_points", amount)

    def list_top_by_points(self, limit: int) -> list[Profile]:
        """Return the leaderboard rows."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .order("total_points", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_profile(row) for row in response.data or []]

    def _increment(self, profile_id: UUID, column: str, amount: int) -> None:
        self.client.rpc(
            "increment_profile_counter",
            {"profile_id": str(profile_id), "counter": column, "amount": amount},
        ).execute()


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        id=UUID(str(row["id"])),
        email=str(row.get("email") or ""),
        full_name=str(row.get("full_name") or ""),
        account_type=AccountType(row["account_type"]),
        total_points=int(row.get("total_points") or 0),
        total_donations=int(row.get("total_donations") or 0),
        total_claims=int(row.get("total_claims") or 0),
    )
