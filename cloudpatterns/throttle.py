"""Token-bucket throttling of an operation."""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Awaitable, Callable

Effector = Callable[[], Awaitable[str]]


class TooManyCallsError(Exception):
    """Raised when the bucket has no tokens left."""

    def __init__(self, message: str = "too many calls") -> None:
        super().__init__(message)


def throttle(
    effector: Effector, max_tokens: int, refill: int, interval: float
) -> Effector:
    """Limit ``effector`` to a bucket of ``max_tokens`` calls.

    The bucket starts full. Every ``interval`` seconds after the first call,
    ``refill`` tokens are added back, never above ``max_tokens``. A call made
    with an empty bucket raises :class:`TooManyCallsError`.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    lock = asyncio.Lock()
    tokens = max_tokens
    started: float | None = None
    ticks_seen = 0

    def replenish(now: float) -> None:
        nonlocal tokens, ticks_seen
        assert started is not None
        ticks = int((now - started) // interval)
        if ticks > ticks_seen:
            tokens = min(max_tokens, tokens + refill * (ticks - ticks_seen))
            ticks_seen = ticks

    @functools.wraps(effector)
    async def wrapped() -> str:
        nonlocal tokens, started

        if started is None:
            started = time.monotonic()

        async with lock:
            replenish(time.monotonic())
            if tokens <= 0:
                raise TooManyCallsError()
            tokens -= 1
            return await effector()

    return wrapped