"""A timer that stops a ticker once it fires."""

from __future__ import annotations

import threading
import time


def timely_fixed(duration: float = 5.0, interval: float = 1.0) -> int:
    """Print ``tick!`` every ``interval`` seconds until ``duration`` has passed.

    Then print ``timer done!`` and return the number of ticks printed.
    The ticker is always stopped before this returns.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    done = threading.Event()
    ticks = 0

    def ticker() -> None:
        nonlocal ticks
        next_tick = time.monotonic() + interval
        while not done.wait(max(0.0, next_tick - time.monotonic())):
            print("tick!")
            ticks += 1
            next_tick += interval

    worker = threading.Thread(target=ticker, daemon=True)
    worker.start()
    try:
        time.sleep(duration)
    finally:
        done.set()
        worker.join()

    print("timer done!")
    return ticks