"""Supabase auth adapter for resolving access tokens."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from supabase import AuthError, Client

logger = logging.getLogger(__name__)


class AuthClient(Protocol):
    """Interface for validating end-user access tokens."""

    def resolve_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, or None."""


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves Supabase JWTs through the auth API."""

    client: Client

    def resolve_user_id(self, access_token: str) -> UUID | None:
        """Look up the user behind an access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError:
            logger.info("Rejected access token")
            return None
        if response is None or response.user is None:
            return None
        return UUID(response.user.id)
