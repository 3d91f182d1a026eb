"""Helpers shared by the Supabase adapters."""

from datetime import UTC, datetime

UNIQUE_VIOLATION = "23505"


def parse_timestamp(raw: object) -> datetime:
    """Parse a PostgREST timestamp, treating naive values as UTC."""
    if isinstance(raw, str) and raw:
        parsed = datetime.fromisoformat(raw)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.min.replace(tzinfo=UTC)
