"""Circuit breaker that backs off exponentially after repeated failures."""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable

Circuit = Callable[[], Awaitable[str]]


class ServiceUnreachableError(Exception):
    """Raised while the breaker is open and refuses to call the circuit."""

    def __init__(self, message: str = "service unreachable") -> None:
        super().__init__(message)


def breaker(circuit: Circuit, threshold: int) -> Circuit:
    """Wrap ``circuit`` so that it is not called while it keeps failing.

    Once ``threshold`` consecutive failures have been seen, calls are refused
    with :class:`ServiceUnreachableError` until ``2 << (failures - threshold)``
    seconds have passed since the last attempt. A success resets the count.
    """
    failures = 0
    last = time.monotonic()

    @functools.wraps(circuit)
    async def wrapped() -> str:
        nonlocal failures, last

        overflow = failures - threshold
        if overflow >= 0:
            retry_at = last + (2 << overflow)
            if time.monotonic() <= retry_at:
                raise ServiceUnreachableError()

        try:
            response = await circuit()
        except Exception:
            last = time.monotonic()
            failures += 1
            raise

        last = time.monotonic()
        failures = 0
        return response

    return wrapped