"""Retry an operation a fixed number of times with a fixed delay."""

from __future__ import annotations

import asyncio
import functools
import logging

from cloudpatterns.throttle import Effector

logger = logging.getLogger(__name__)


def retry(effector: Effector, retries: int, delay: float) -> Effector:
    """Wrap ``effector`` so that a failure is retried up to ``retries`` times.

    Between attempts the wrapper sleeps ``delay`` seconds. The last error is
    raised once the retries are used up.
    """

    @functools.wraps(effector)
    async def wrapped() -> str:
        attempt = 0
        while True:
            try:
                return await effector()
            except Exception:
                if attempt >= retries:
                    raise
            attempt += 1
            logger.warning("Attempt %d failed; retrying in %gs", attempt, delay)
            await asyncio.sleep(delay)

    return wrapped