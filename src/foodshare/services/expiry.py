"""Periodic expiry sweep."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from foodshare.services.reservations import ReservationService
from foodshare.services.store import utcnow

logger = logging.getLogger(__name__)

JOB_ID = "expire_listings"


@dataclass
class ExpirySweeper:
    """Runs ``expire_listings`` on an APScheduler interval job.

    The clock is injectable so tests can move time without waiting.
    """

    reservation_service: ReservationService
    interval_seconds: float
    clock: Callable[[], datetime] = utcnow
    _scheduler: AsyncIOScheduler | None = field(default=None, init=False, repr=False)

    async def run_once(self) -> list[UUID]:
        """Expire everything past its expiry at the clock's current time."""
        return await self.reservation_service.expire_listings(self.clock())

    async def sweep(self) -> None:
        """Scheduled job body. A failed sweep is logged and retried next tick."""
        try:
            await self.run_once()
        except Exception:
            logger.exception("Expiry sweep failed")

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the scheduler on the running event loop; first sweep runs now."""
        if self.running:
            return
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.add_job(
            self.sweep,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            next_run_time=datetime.now(tz=UTC),
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler

    def stop(self) -> None:
        """Shut the scheduler down without waiting for a running sweep."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
