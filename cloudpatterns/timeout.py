"""Give a blocking function a cancellable, awaitable form."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable


def timeout(func: Callable[[str], str]) -> Callable[[str], Awaitable[str]]:
    """Run ``func`` in a worker thread so that callers can stop waiting on it.

    Wrap the call in :func:`asyncio.timeout` to bound it; when the deadline
    passes the caller gets :class:`TimeoutError` while ``func`` finishes
    in the background and its result is discarded.
    """

    @functools.wraps(func)
    async def wrapped(arg: str) -> str:
        return await asyncio.to_thread(func, arg)

    return wrapped