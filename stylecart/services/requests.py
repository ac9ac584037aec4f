"""Request bookkeeping shared by the stylist and try-on flows."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")

Delay = Callable[[float], Awaitable[None]]


async def no_delay(_: float) -> None:
    """Delay stand-in that still yields to the event loop."""

    await asyncio.sleep(0)


class LatestResult(Generic[T]):
    """Holds the result of the most recently started request.

    Each request takes a token from ``begin``. Completions carrying an older
    token are rejected, so only the newest request can become visible.
    """

    def __init__(self) -> None:
        self._token = 0
        self._value: T | None = None

    def begin(self) -> int:
        self._token += 1
        return self._token

    def is_current(self, token: int) -> bool:
        return token == self._token

    def publish(self, token: int, value: T) -> bool:
        """Store ``value`` if ``token`` is still current. Returns whether it was kept."""

        if not self.is_current(token):
            return False
        self._value = value
        return True

    @property
    def value(self) -> T | None:
        return self._value
