"""Port for exporting counters and gauges to an observability backend."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsExporterPort(Protocol):
    """Receive counts and totals from the core; registration lives elsewhere."""

    def increment(self, name: str, amount: int = 1) -> None:
        """Add ``amount`` to the counter ``name``."""

    def gauge(self, name: str, value: float) -> None:
        """Publish the latest ``value`` for ``name``."""


__all__ = ["MetricsExporterPort"]
