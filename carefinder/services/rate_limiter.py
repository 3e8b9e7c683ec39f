"""In-memory sliding-window rate limiter keyed by client IP."""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from dataclasses import dataclass

from carefinder.config import settings


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.retry_after),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class SlidingWindowRateLimiter:
    """Thread-safe per-client sliding-window rate limiter.

    A disabled limiter admits every request and tracks nothing.
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: int = 60,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self._max_requests = max_requests
        self._window = window_seconds
        self._buckets: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def check(self, client: str) -> RateLimitDecision:
        """Record a hit for *client* and report whether it may proceed."""
        if not self.enabled:
            return RateLimitDecision(True, self._max_requests, self._max_requests, 0)

        now = time.monotonic()
        window_start = now - self._window

        with self._lock:
            dq = self._buckets.setdefault(client, deque())

            while dq and dq[0] <= window_start:
                dq.popleft()

            retry_after = (
                math.ceil(self._window - (now - dq[0])) if dq else self._window
            )

            if len(dq) >= self._max_requests:
                return RateLimitDecision(False, self._max_requests, 0, retry_after)

            dq.append(now)
            remaining = self._max_requests - len(dq)
            return RateLimitDecision(True, self._max_requests, remaining, retry_after)

    @property
    def active_clients(self) -> int:
        with self._lock:
            return len(self._buckets)

    def clear(self) -> None:
        """Remove all tracked state (useful in tests)."""
        with self._lock:
            self._buckets.clear()


search_rate_limiter = SlidingWindowRateLimiter(
    max_requests=settings.rate_limit_per_minute,
    window_seconds=settings.rate_limit_window,
    enabled=settings.rate_limit_enabled,
)
