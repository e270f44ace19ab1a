"""Adapters implementing the application ports.

The FastAPI application lives in :mod:`lib_log_store.adapters.http` and is
imported explicitly by callers that serve HTTP.
"""

from __future__ import annotations

from .console.rich_console import RichConsoleSink
from .logging_bridge import SinkHandler, event_from_record, install_trace_level
from .memory_store import InMemoryEventStore
from .metrics import InMemoryMetrics
from .queue import QueuedSink
from .remote import RemoteSink
from .report import StatsReportAdapter
from .sinks import BufferSink, StoreSink

__all__ = [
    "BufferSink",
    "InMemoryEventStore",
    "InMemoryMetrics",
    "QueuedSink",
    "RemoteSink",
    "RichConsoleSink",
    "SinkHandler",
    "StatsReportAdapter",
    "StoreSink",
    "event_from_record",
    "install_trace_level",
]
