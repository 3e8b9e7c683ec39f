"""Thread-safe in-memory application metrics collector."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field


def _percentiles(samples: list[float]) -> dict[str, float]:
    if not samples:
        return {"p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    s = sorted(samples)
    n = len(s)
    return {
        "p50": round(s[int(n * 0.50)], 2),
        "p90": round(s[int(min(n * 0.90, n - 1))], 2),
        "p95": round(s[int(min(n * 0.95, n - 1))], 2),
        "p99": round(s[int(min(n * 0.99, n - 1))], 2),
    }


@dataclass
class MetricsCollector:
    """Collects request and search counters plus latency samples.

    Thread-safe via a single ``threading.Lock``.  Each latency list is
    bounded at ``_MAX_LATENCY_SAMPLES``; when exceeded it is halved by
    keeping only the most-recent entries.
    """

    _MAX_LATENCY_SAMPLES: int = field(default=10_000, repr=False)

    # HTTP counters
    total_requests: int = field(default=0, init=False)
    status_codes: dict[int, int] = field(default_factory=dict, init=False)
    rate_limited: int = field(default=0, init=False)

    # Search counters
    searches: int = field(default=0, init=False)
    searches_rejected: int = field(default=0, init=False)
    searches_empty: int = field(default=0, init=False)
    searches_failed: int = field(default=0, init=False)
    searches_slow: int = field(default=0, init=False)

    # Latency samples (milliseconds)
    _latencies: list[float] = field(default_factory=list, init=False, repr=False)
    _search_latencies: list[float] = field(default_factory=list, init=False, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _start_time: float = field(default_factory=time.monotonic, init=False, repr=False)

    # -- Counter helpers ---------------------------------------------------

    def inc_request(self, status_code: int) -> None:
        with self._lock:
            self.total_requests += 1
            self.status_codes[status_code] = self.status_codes.get(status_code, 0) + 1

    def inc_rate_limited(self) -> None:
        with self._lock:
            self.rate_limited += 1

    def inc_search_rejected(self) -> None:
        with self._lock:
            self.searches_rejected += 1

    def inc_search_failure(self) -> None:
        with self._lock:
            self.searches_failed += 1

    def record_search(self, duration_ms: float, result_count: int, slow: bool) -> None:
        with self._lock:
            self.searches += 1
            if result_count == 0:
                self.searches_empty += 1
            if slow:
                self.searches_slow += 1
            self._append_bounded(self._search_latencies, duration_ms)

    # -- Latency -----------------------------------------------------------

    def record_latency(self, ms: float) -> None:
        with self._lock:
            self._append_bounded(self._latencies, ms)

    def _append_bounded(self, samples: list[float], value: float) -> None:
        """Caller must hold ``_lock``."""
        samples.append(value)
        if len(samples) > self._MAX_LATENCY_SAMPLES:
            half = self._MAX_LATENCY_SAMPLES // 2
            del samples[:-half]

    def get_latency_percentiles(self) -> dict[str, float]:
        with self._lock:
            return _percentiles(self._latencies)

    # -- Snapshot / reset --------------------------------------------------

    def uptime_seconds(self) -> float:
        return round(time.monotonic() - self._start_time, 2)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "uptime_seconds": round(time.monotonic() - self._start_time, 2),
                "total_requests": self.total_requests,
                "status_codes": dict(self.status_codes),
                "rate_limited": self.rate_limited,
                "search": {
                    "total": self.searches,
                    "rejected": self.searches_rejected,
                    "empty": self.searches_empty,
                    "failed": self.searches_failed,
                    "slow": self.searches_slow,
                    "latency_ms": _percentiles(self._search_latencies),
                },
                "latency_ms": _percentiles(self._latencies),
            }

    def reset(self) -> None:
        with self._lock:
            self.total_requests = 0
            self.status_codes.clear()
            self.rate_limited = 0
            self.searches = 0
            self.searches_rejected = 0
            self.searches_empty = 0
            self.searches_failed = 0
            self.searches_slow = 0
            self._latencies.clear()
            self._search_latencies.clear()
            self._start_time = time.monotonic()


# Module-level singleton
metrics = MetricsCollector()
