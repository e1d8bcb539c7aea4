"""A value that becomes available once a background task finishes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True)
class Future:
    """Handle to a running task whose outcome can be awaited many times."""

    task: asyncio.Task[str]

    async def result(self) -> str:
        """Wait for the task and return its result, or raise its error.

        Once the task is done every further call returns at once.
        """
        return await self.task


def slow_function(delay: float = 2.0) -> Future:
    """Start a task that sleeps ``delay`` seconds and reports having done so."""

    async def sleeper() -> str:
        await asyncio.sleep(delay)
        return f"I slept for {delay:g} seconds"

    return Future(asyncio.create_task(sleeper()))