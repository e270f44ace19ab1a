"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate :class:`RuntimeSettings` into the live :class:`LogStoreRuntime`
singleton. The helpers here keep wiring small, declarative, and testable.

Contents
--------
* Sink selection (buffer, console, queued remote forwarding).
* Ingestion, query, statistics, and maintenance use case construction.
* Shutdown wiring exporting the buffer before sinks close.

System Role
-----------
Anchors the clean-architecture boundary: outer adapters are chosen here, while
``lib_log_store.runtime`` exposes only the façade.
"""

from __future__ import annotations

import logging

from lib_log_store.adapters.memory_store import InMemoryEventStore
from lib_log_store.adapters.report import StatsReportAdapter
from lib_log_store.application.ports import ClockPort, EventStorePort, IdProvider
from lib_log_store.application.use_cases import (
    QueryEngine,
    StatsAggregator,
    create_clear_events,
    create_ingest_event,
    create_shutdown,
)
from lib_log_store.domain import EventValidator

from ._factories import SystemClock, UuidProvider, create_buffer, create_metrics, create_sinks
from ._settings import RuntimeSettings
from ._state import LogStoreRuntime

logger = logging.getLogger(__name__)


def build_runtime(
    settings: RuntimeSettings,
    *,
    store: EventStorePort | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
) -> LogStoreRuntime:
    """Assemble the log store runtime from resolved settings.

    ``store``, ``clock`` and ``id_provider`` may be injected by tests or host
    applications; defaults are the in-memory store, the system clock and
    random UUIDs.
    """

    resolved_store: EventStorePort = store if store is not None else InMemoryEventStore()
    resolved_clock: ClockPort = clock if clock is not None else SystemClock()
    resolved_ids: IdProvider = id_provider if id_provider is not None else UuidProvider()
    metrics = create_metrics()
    buffer = create_buffer(settings)
    sinks = tuple(create_sinks(settings, buffer=buffer, metrics=metrics))
    validator = EventValidator(id_provider=resolved_ids)

    ingest = create_ingest_event(
        validator=validator,
        store=resolved_store,
        sinks=sinks,
        metrics=metrics,
        diagnostic=settings.diagnostic_hook,
    )
    shutdown = create_shutdown(
        sinks=sinks,
        buffer=buffer,
        export_path=settings.buffer_export_path,
    )
    logger.debug(
        "runtime composed: buffer=%s sinks=%s",
        buffer.capacity if buffer is not None else None,
        [type(sink).__name__ for sink in sinks],
    )
    return LogStoreRuntime(
        store=resolved_store,
        buffer=buffer,
        validator=validator,
        ingest=ingest,
        query_engine=QueryEngine(resolved_store),
        aggregator=StatsAggregator(resolved_store),
        renderer=StatsReportAdapter(),
        clear=create_clear_events(store=resolved_store, metrics=metrics),
        metrics=metrics,
        sinks=sinks,
        shutdown=shutdown,
        started_at=resolved_clock.now(),
    )


__all__ = ["build_runtime"]
