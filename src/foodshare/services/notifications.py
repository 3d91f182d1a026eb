"""Lifecycle event notification."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from foodshare.domain.events import LifecycleEvent

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Interface for delivering lifecycle events to donors and recipients."""

    async def notify(self, event: LifecycleEvent) -> None:
        """Deliver an event. Failures must not affect the caller's state."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that only writes events to the application log."""

    level: int = logging.INFO

    async def notify(self, event: LifecycleEvent) -> None:
        """Log the event payload."""
        logger.log(self.level, "Lifecycle event", extra={"event": event.to_payload()})


@dataclass
class BackgroundNotifier(Notifier):
    """Hands events to another notifier without holding up the caller.

    Each event is delivered in its own task; failures are logged. ``drain``
    waits for deliveries still in flight.
    """

    delegate: Notifier
    _pending: set[asyncio.Task[None]] = field(default_factory=set, repr=False)

    async def notify(self, event: LifecycleEvent) -> None:
        """Schedule delivery and return immediately."""
        task = asyncio.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _deliver(self, event: LifecycleEvent) -> None:
        try:
            await self.delegate.notify(event)
        except Exception:
            logger.exception(
                "Failed to deliver lifecycle event",
                extra={"event": event.to_payload()},
            )
