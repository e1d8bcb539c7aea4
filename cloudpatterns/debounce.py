"""Debouncing wrappers that collapse bursts of calls into one."""

from __future__ import annotations

import asyncio
import functools
import time

from cloudpatterns.breaker import Circuit


def debounce_first(circuit: Circuit, duration: float) -> Circuit:
    """Call ``circuit`` at most once per ``duration`` seconds.

    Calls made within ``duration`` of the last real call get its cached
    outcome: the same result, or the same exception raised again.
    """
    lock = asyncio.Lock()
    threshold = float("-inf")
    result = ""
    error: Exception | None = None

    @functools.wraps(circuit)
    async def wrapped() -> str:
        nonlocal threshold, result, error

        async with lock:
            if time.monotonic() < threshold:
                if error is not None:
                    raise error
                return result

            try:
                result, error = await circuit(), None
            except Exception as exc:
                result, error = "", exc
            threshold = time.monotonic() + duration

            if error is not None:
                raise error
            return result

    return wrapped


def debounce_last(circuit: Circuit, duration: float) -> Circuit:
    """Call ``circuit`` only once ``duration`` seconds pass without a new call.

    Each call supersedes the one before it; a superseded caller sees
    :class:`asyncio.CancelledError`.
    """
    pending: asyncio.Task[str] | None = None

    async def delayed() -> str:
        await asyncio.sleep(duration)
        return await circuit()

    @functools.wraps(circuit)
    async def wrapped() -> str:
        nonlocal pending

        if pending is not None:
            pending.cancel()

        task = asyncio.create_task(delayed())
        pending = task
        return await task

    return wrapped