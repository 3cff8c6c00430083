"""
Fixed-window rate limiter.

Counts requests per key inside a window; the first request after a window
expires opens a new one. Used by the web layer for the general API limit
and the stricter rating submission limit.
"""

from dataclasses import dataclass
import threading
import time
from typing import Callable, Dict, Tuple


@dataclass
class RateLimitResult:
    """Outcome of a rate limit check."""
    allowed: bool
    remaining: int
    reset_at: float
    retry_after: float = 0.0


class RateLimiter:
    """
    Per-key fixed-window request counter.

    Thread-safe; the clock is injectable for tests.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, Tuple[int, float]] = {}

    def check(self, key: str) -> RateLimitResult:
        """
        Count one request for `key` and report whether it is allowed.

        Rejected requests do not extend or consume the window.
        """
        now = self._clock()
        with self._lock:
            count, reset_at = self._windows.get(key, (0, 0.0))

            if count == 0 or now >= reset_at:
                reset_at = now + self.window_seconds
                self._windows[key] = (1, reset_at)
                return RateLimitResult(True, self.max_requests - 1, reset_at)

            if count >= self.max_requests:
                return RateLimitResult(False, 0, reset_at, retry_after=max(reset_at - now, 0.0))

            count += 1
            self._windows[key] = (count, reset_at)
            return RateLimitResult(True, self.max_requests - count, reset_at)

    def reset(self, key: str = None) -> None:
        """Forget one key's window, or all windows when key is None."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)
