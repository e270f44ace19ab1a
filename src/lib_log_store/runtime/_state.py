"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Callable

from lib_log_store.adapters.metrics import InMemoryMetrics
from lib_log_store.adapters.report import StatsReportAdapter
from lib_log_store.application.ports import EventStorePort, LogSinkPort
from lib_log_store.application.use_cases import QueryEngine, StatsAggregator
from lib_log_store.application.use_cases.ingest import IngestCallable
from lib_log_store.domain import BoundedBuffer, EventValidator


@dataclass(slots=True)
class LogStoreRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    store: EventStorePort
    buffer: BoundedBuffer | None
    validator: EventValidator
    ingest: IngestCallable
    query_engine: QueryEngine
    aggregator: StatsAggregator
    renderer: StatsReportAdapter
    clear: Callable[[], None]
    metrics: InMemoryMetrics
    sinks: tuple[LogSinkPort, ...]
    shutdown: Callable[[], None]
    started_at: datetime


_STATE: LogStoreRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: LogStoreRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> None:
    """Remove the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        _STATE = None


def current_runtime() -> LogStoreRuntime:
    """Return the active runtime or raise when uninitialised."""

    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_store.init() must be called before using the log store API")
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when :func:`lib_log_store.init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "LogStoreRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
