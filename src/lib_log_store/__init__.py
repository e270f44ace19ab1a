"""Public package surface for the log store.

``import lib_log_store`` gives access to the runtime façade (``init``,
``ingest``, ``query``, ``stats``, ``clear``, ``shutdown``) together with the
domain types callers exchange with it.
"""

from __future__ import annotations

from .domain import (
    BoundedBuffer,
    EventValidator,
    LogEvent,
    LogLevel,
    LogStoreError,
    StatsFormat,
    ValidationResult,
)
from .runtime import (
    RuntimeSnapshot,
    clear,
    current_runtime,
    ingest,
    init,
    inspect_runtime,
    is_initialised,
    query,
    shutdown,
    stats,
)

__all__ = [
    "BoundedBuffer",
    "EventValidator",
    "LogEvent",
    "LogLevel",
    "LogStoreError",
    "RuntimeSnapshot",
    "StatsFormat",
    "ValidationResult",
    "clear",
    "current_runtime",
    "ingest",
    "init",
    "inspect_runtime",
    "is_initialised",
    "query",
    "shutdown",
    "stats",
]
