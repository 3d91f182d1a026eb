"""Bounded calls into the synchronous store clients."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ParamSpec, TypeVar

from foodshare.exceptions import StoreTimeoutError

P = ParamSpec("P")
T = TypeVar("T")


def utcnow() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)


@dataclass
class StoreCaller:
    """Runs blocking repository calls off the event loop with a timeout.

    A timed-out call is abandoned, not killed: the worker thread may still
    finish, so only conditional writes are safe to retry afterwards.
    """

    timeout_seconds: float = 5.0

    async def __call__(
        self, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs
    ) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            name = getattr(func, "__qualname__", repr(func))
            raise StoreTimeoutError(name, self.timeout_seconds) from exc
