"""Pacing and cancellation for long runs of sequential model calls."""

import threading
import time

from src.errors import ChunkingCancelled


class Throttle:
    """Enforces a minimum interval between successive external calls.

    Only the remaining part of the interval is slept, so slow calls are
    not penalized twice. An interval of 0 disables pacing.
    """

    def __init__(self, min_interval: float = 0.5, clock=time.monotonic, sleep=time.sleep):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def wait(self) -> None:
        if self._min_interval and self._last is not None:
            remaining = self._min_interval - (self._clock() - self._last)
            if remaining > 0:
                self._sleep(remaining)
        self._last = self._clock()


class CancellationToken:
    """Cooperative cancellation flag checked between model calls."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ChunkingCancelled("Chunking run was cancelled")
