"""Webhook notifier adapter."""

from dataclasses import dataclass

import httpx

from foodshare.domain.events import LifecycleEvent
from foodshare.services.notifications import Notifier


@dataclass
class HttpxWebhookNotifier(Notifier):
    """Posts lifecycle events as JSON to a webhook endpoint."""

    webhook_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 5.0

    @classmethod
    def create(cls, webhook_url: str) -> "HttpxWebhookNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(webhook_url=webhook_url, http_client=httpx.AsyncClient())

    async def notify(self, event: LifecycleEvent) -> None:
        """Deliver one event; raises on transport or HTTP errors."""
        response = await self.http_client.post(
            self.webhook_url, json=event.to_payload(), timeout=self.timeout_seconds
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
