"""Factory helpers used by the runtime composition root."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from lib_log_store.adapters.console.rich_console import RichConsoleSink
from lib_log_store.adapters.metrics import InMemoryMetrics
from lib_log_store.adapters.queue import QueuedSink
from lib_log_store.adapters.remote import RemoteSink
from lib_log_store.adapters.sinks import BufferSink
from lib_log_store.application.ports import LogSinkPort, MetricsExporterPort
from lib_log_store.domain import BoundedBuffer

from ._settings import RuntimeSettings


class SystemClock:
    """Concrete clock returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidProvider:
    """Generate canonical random UUID strings for events without ``id``."""

    def __call__(self) -> str:
        return str(uuid.uuid4())


def create_buffer(settings: RuntimeSettings) -> BoundedBuffer | None:
    """Return the bounded buffer when enabled."""

    if not settings.enable_buffer:
        return None
    return BoundedBuffer(capacity=settings.buffer_capacity)


def create_sinks(
    settings: RuntimeSettings,
    *,
    buffer: BoundedBuffer | None,
    metrics: MetricsExporterPort,
) -> list[LogSinkPort]:
    """Build the secondary sinks in fan-out order: buffer, console, remote."""

    sinks: list[LogSinkPort] = []
    if buffer is not None:
        sinks.append(BufferSink(buffer, metrics=metrics))
    if settings.console:
        sinks.append(RichConsoleSink(force_color=settings.force_color, no_color=settings.no_color))
    if settings.remote_url:
        remote = RemoteSink(settings.remote_url, timeout=settings.remote_timeout)
        sinks.append(
            QueuedSink(
                remote,
                maxsize=settings.remote_queue_maxsize,
                drop_policy="drop",
                on_drop=lambda _event: metrics.increment("remote.dropped"),
                diagnostic=settings.diagnostic_hook,
            )
        )
    return sinks


def create_metrics() -> InMemoryMetrics:
    return InMemoryMetrics()


__all__ = [
    "SystemClock",
    "UuidProvider",
    "create_buffer",
    "create_metrics",
    "create_sinks",
]
