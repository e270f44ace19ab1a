"""Thread-based queue wrapping a sink whose delivery may block.

Purpose
-------
Keep blocking I/O (remote forwarding) off the ingestion path: events are
queued and delivered to the wrapped sink by a background worker.

Contents
--------
* :class:`QueuedSink` - background worker implementing :class:`LogSinkPort`.

System Role
-----------
Wired by the runtime around :class:`RemoteSink`. Ingestion only pays for a
``queue.put``; delivery failures stay inside the worker and are logged.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

from lib_log_store.application.ports.sink import LogSinkPort, SinkClosedError
from lib_log_store.domain.events import LogEvent


LOGGER = logging.getLogger(__name__)


class QueuedSink:
    """Deliver events to ``inner`` on a background thread.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.events = []
    ...     def accept(self, event):
    ...         self.events.append(event.event_id)
    ...     def close(self):
    ...         pass
    >>> from datetime import datetime, timezone
    >>> from lib_log_store.domain.levels import LogLevel
    >>> inner = Recorder()
    >>> sink = QueuedSink(inner)
    >>> sink.accept(LogEvent("id", "msg", datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc), "main", "svc", LogLevel.INFO))
    >>> sink.close()
    >>> inner.events
    ['id']
    """

    def __init__(
        self,
        inner: LogSinkPort,
        *,
        maxsize: int = 2048,
        drop_policy: str = "block",
        timeout: float | None = 1.0,
        on_drop: Callable[[LogEvent], None] | None = None,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
        autostart: bool = True,
    ) -> None:
        """Create the queue around ``inner``.

        Parameters
        ----------
        inner:
            Sink receiving events on the worker thread.
        maxsize:
            Maximum number of queued events before backpressure or drops apply.
        drop_policy:
            Either ``"block"`` (producers wait up to ``timeout``) or ``"drop"``
            (new events are rejected when the queue is full).
        timeout:
            Producer wait in seconds for the blocking policy; ``None`` waits
            indefinitely.
        on_drop:
            Optional callback invoked for every dropped event.
        """
        policy = drop_policy.lower()
        if policy not in {"block", "drop"}:
            raise ValueError("drop_policy must be 'block' or 'drop'")
        self._inner = inner
        self._queue: queue.Queue[LogEvent | None] = queue.Queue(maxsize=maxsize)
        self._drop_policy = policy
        self._timeout = timeout
        self._on_drop = on_drop
        self._diagnostic = diagnostic
        self._thread: threading.Thread | None = None
        self._closed = False
        self._dropped = 0
        self._lock = threading.Lock()
        if autostart:
            self.start()

    @property
    def dropped_count(self) -> int:
        """Return how many events were rejected because the queue was full."""
        return self._dropped

    @property
    def inner(self) -> LogSinkPort:
        return self._inner

    def start(self) -> None:
        """Start the background worker thread if it is not already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self._run, name="lib_log_store-queue", daemon=True)
            self._thread.start()

    def accept(self, event: LogEvent) -> None:
        """Enqueue ``event``; a full queue drops it according to the policy."""
        if self._closed:
            raise SinkClosedError("Cannot append to a closed sink")
        try:
            if self._drop_policy == "drop":
                self._queue.put(event, block=False)
            else:
                self._queue.put(event, timeout=self._timeout)
        except queue.Full:
            self._handle_drop(event)

    def wait_until_idle(self) -> None:
        """Block until every queued event was handed to the inner sink."""
        self._queue.join()

    def close(self) -> None:
        """Drain pending events, stop the worker, and close the inner sink."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
        if thread is not None:
            self._queue.put(None)
            thread.join()
        self._inner.close()

    def _run(self) -> None:
        """Internal worker loop draining the queue until the stop marker."""
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    break
                try:
                    self._inner.accept(item)
                except Exception as exc:  # noqa: BLE001
                    LOGGER.error("Queued sink worker raised an exception; continuing", exc_info=exc)
                    self._emit_diagnostic("queue_worker_error", {"event_id": item.event_id, "exception": repr(exc)})
            finally:
                self._queue.task_done()

    def _handle_drop(self, event: LogEvent) -> None:
        self._dropped += 1
        LOGGER.warning("queue full; dropped event %s", event.event_id)
        self._emit_diagnostic("queue_full", {"event_id": event.event_id, "dropped": self._dropped})
        if self._on_drop is not None:
            self._on_drop(event)

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Queue diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["QueuedSink"]
