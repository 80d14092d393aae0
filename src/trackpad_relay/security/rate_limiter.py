from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """
    Fixed-window counter.

    The window restarts on the first call after it expires rather than sliding,
    so a burst straddling a reset can admit up to 2x `max_per_second`.
    """

    def __init__(self, max_per_second: int = 1000, *, clock: Callable[[], float] = time.monotonic):
        if max_per_second < 1:
            raise ValueError("max_per_second must be >= 1")
        self._max = max_per_second
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._window_start = clock()

    @property
    def max_per_second(self) -> int:
        return self._max

    def allow(self) -> bool:
        """Count one event; False if it exceeds the ceiling for the current window."""
        with self._lock:
            now = self._clock()
            if now - self._window_start >= 1.0:
                self._count = 0
                self._window_start = now
            self._count += 1
            return self._count <= self._max

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._window_start = self._clock()
