"""Domain models for user profiles."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class AccountType(StrEnum):
    """Kinds of accounts on the marketplace."""

    DONOR = "donor"
    RECIPIENT = "recipient"


@dataclass(frozen=True)
class Profile:
    """Represents a profile row with reward counters."""

    id: UUID
    email: str
    full_name: str
    account_type: AccountType
    total_points: int
    total_donations: int
    total_claims: int


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a service operation."""

    user_id: UUID
    account_type: AccountType

    @property
    def is_donor(self) -> bool:
        return self.account_type is AccountType.DONOR

    @property
    def is_recipient(self) -> bool:
        return self.account_type is AccountType.RECIPIENT
