"""Store-backed and buffer-backed sinks.

Purpose
-------
Route accepted events into an :class:`EventStorePort` or a
:class:`BoundedBuffer`. Each sink is an independent class implementing the
two-method :class:`LogSinkPort` capability; nothing is inherited.

Contents
--------
* :class:`StoreSink` - saves into a store, tolerating duplicates.
* :class:`BufferSink` - appends into a bounded buffer and publishes its size
  and discard total.
"""

from __future__ import annotations

import logging

from lib_log_store.application.ports.metrics import MetricsExporterPort
from lib_log_store.application.ports.sink import SinkClosedError
from lib_log_store.application.ports.store import EventStorePort, SaveOutcome
from lib_log_store.domain.bounded_buffer import BoundedBuffer
from lib_log_store.domain.events import LogEvent

logger = logging.getLogger(__name__)


class StoreSink:
    """Save every accepted event into ``store``."""

    def __init__(self, store: EventStorePort) -> None:
        self._store = store
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def accept(self, event: LogEvent) -> None:
        if self._closed:
            raise SinkClosedError("Cannot append to a closed sink")
        if self._store.save(event) is SaveOutcome.DUPLICATE:
            logger.debug("store sink ignored duplicate event %s", event.event_id)

    def close(self) -> None:
        self._closed = True


class BufferSink:
    """Append accepted events to a :class:`BoundedBuffer`.

    Closing the sink empties the buffer; the discard counter survives.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_store.domain.levels import LogLevel
    >>> buffer = BoundedBuffer(capacity=1)
    >>> sink = BufferSink(buffer)
    >>> ts = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> sink.accept(LogEvent("a", "first", ts, "main", "svc", LogLevel.INFO))
    >>> sink.accept(LogEvent("b", "second", ts, "main", "svc", LogLevel.INFO))
    >>> len(buffer), buffer.discarded_count
    (1, 1)
    """

    def __init__(self, buffer: BoundedBuffer, *, metrics: MetricsExporterPort | None = None, name: str = "buffer") -> None:
        self._buffer = buffer
        self._metrics = metrics
        self._name = name
        self._closed = False

    @property
    def buffer(self) -> BoundedBuffer:
        return self._buffer

    @property
    def closed(self) -> bool:
        return self._closed

    def accept(self, event: LogEvent) -> None:
        if self._closed:
            raise SinkClosedError("Cannot append to a closed sink")
        self._buffer.append(event)
        self._publish()

    def close(self) -> None:
        if self._closed:
            return
        self._buffer.clear()
        self._closed = True
        self._publish()

    def _publish(self) -> None:
        if self._metrics is None:
            return
        self._metrics.gauge(f"{self._name}.size", len(self._buffer))
        self._metrics.gauge(f"{self._name}.discarded", self._buffer.discarded_count)


__all__ = ["BufferSink", "StoreSink"]
