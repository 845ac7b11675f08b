# SPDX-License-Identifier: HRUL-1.0
# Copyright (c) 2026 Gabriel Galán Pelayo
"""
Stats sinks for the logging middleware.

Any object with ``timing(key, duration)`` and ``incr_by(key, delta)`` can be
passed as ``stats=``. Two implementations ship here:
- MemoryStats: in-process, thread-safe, constant memory per stat name
- PrometheusStats: forwards to prometheus_client metrics

Sinks are shared by every concurrent request and must be thread-safe.
"""

import threading
from datetime import timedelta
from typing import Any, Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class StatsSink(Protocol):
    def timing(self, key: str, duration: timedelta) -> Any: ...

    def incr_by(self, key: str, delta: int) -> Any: ...


class MemoryStats:
    """Keeps counters and per-key timing totals in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        # key -> [sample count, summed duration]
        self._timings: dict[str, list] = {}
        self._counters: dict[str, int] = {}

    def timing(self, key: str, duration: timedelta) -> None:
        with self._lock:
            entry = self._timings.setdefault(key, [0, timedelta(0)])
            entry[0] += 1
            entry[1] += duration

    def incr_by(self, key: str, delta: int) -> None:
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + delta

    def counter(self, key: str) -> int:
        with self._lock:
            return self._counters.get(key, 0)

    def timing_count(self, key: str) -> int:
        with self._lock:
            return self._timings.get(key, [0])[0]

    def timing_total(self, key: str) -> timedelta:
        with self._lock:
            return self._timings.get(key, [0, timedelta(0)])[1]

    def snapshot(self) -> dict[str, Any]:
        """Counters and timing summaries (count, total in ms)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "timings": {
                    key: {"count": count, "total_ms": total / timedelta(milliseconds=1)}
                    for key, (count, total) in self._timings.items()
                },
            }


class PrometheusStats:
    """Adapter onto prometheus_client, one label per stat name."""

    def __init__(self, namespace: str = "clflog", registry: CollectorRegistry = REGISTRY):
        self.latency = Histogram(
            "request_latency_seconds",
            "Time to first response byte",
            ["stat"],
            namespace=namespace,
            registry=registry,
        )
        self.requests = Counter(
            "requests",
            "Requests by stat name and status",
            ["stat"],
            namespace=namespace,
            registry=registry,
        )

    def timing(self, key: str, duration: timedelta) -> None:
        self.latency.labels(stat=key).observe(duration.total_seconds())

    def incr_by(self, key: str, delta: int) -> None:
        self.requests.labels(stat=key).inc(delta)
