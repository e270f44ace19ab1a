"""In-memory metrics exporter.

Purpose
-------
Collect the counters and gauges the core publishes (stored, duplicate and
rejected events, buffer size and discard totals) so the HTTP service and
tests can read them without an external monitoring system.
"""

from __future__ import annotations

import threading
from collections import Counter
from types import MappingProxyType
from typing import Mapping


class InMemoryMetrics:
    """Thread-safe counters and gauges keyed by metric name.

    Examples
    --------
    >>> metrics = InMemoryMetrics()
    >>> metrics.increment("events.stored")
    >>> metrics.increment("events.stored", 2)
    >>> metrics.gauge("buffer.size", 4)
    >>> metrics.counter("events.stored"), metrics.snapshot()["gauges"]["buffer.size"]
    (3, 4)
    """

    def __init__(self) -> None:
        self._counters: Counter[str] = Counter()
        self._gauges: dict[str, float] = {}
        self._lock = threading.Lock()

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def gauge(self, name: str, value: float) -> None:
        with self._lock:
            self._gauges[name] = value

    def counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def snapshot(self) -> dict[str, Mapping[str, float]]:
        """Return read-only copies of all counters and gauges."""

        with self._lock:
            return {
                "counters": MappingProxyType(dict(self._counters)),
                "gauges": MappingProxyType(dict(self._gauges)),
            }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()


__all__ = ["InMemoryMetrics"]
