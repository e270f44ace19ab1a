"""Bridge from the stdlib :mod:`logging` module to log sinks.

Purpose
-------
Let applications attach a sink (buffer, store, remote) to ordinary loggers:
every :class:`logging.LogRecord` is converted into a :class:`LogEvent` and
handed to the sink.

Contents
--------
* :func:`event_from_record` - record conversion.
* :class:`SinkHandler` - :class:`logging.Handler` forwarding to a sink.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from lib_log_store.application.ports.sink import LogSinkPort
from lib_log_store.domain.events import LogEvent
from lib_log_store.domain.levels import TRACE_LEVEL_NUM, LogLevel

_EXCEPTION_FORMATTER = logging.Formatter()


def _new_uuid() -> str:
    return str(uuid.uuid4())


def event_from_record(record: logging.LogRecord, *, event_id: str | None = None) -> LogEvent:
    """Convert ``record`` into a :class:`LogEvent`.

    Examples
    --------
    >>> record = logging.LogRecord("svc.db", logging.WARNING, __file__, 1, "slow %s", ("query",), None)
    >>> event = event_from_record(record, event_id="evt-1")
    >>> event.message, event.level.name, event.logger
    ('slow query', 'WARN', 'svc.db')
    """

    error_details = None
    if record.exc_info:
        error_details = _EXCEPTION_FORMATTER.formatException(record.exc_info)
    elif record.exc_text:
        error_details = record.exc_text
    if record.stack_info:
        stack = _EXCEPTION_FORMATTER.formatStack(record.stack_info)
        error_details = stack if error_details is None else f"{error_details}\n{stack}"
    return LogEvent(
        event_id=event_id or _new_uuid(),
        message=record.getMessage(),
        timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        thread=record.threadName or str(record.thread),
        logger=record.name,
        level=LogLevel.from_python_level(record.levelno),
        error_details=error_details,
    )


class SinkHandler(logging.Handler):
    """Forward log records to a :class:`LogSinkPort`.

    Examples
    --------
    >>> from lib_log_store.domain.bounded_buffer import BoundedBuffer
    >>> from lib_log_store.adapters.sinks import BufferSink
    >>> buffer = BoundedBuffer(capacity=10)
    >>> demo = logging.getLogger("lib_log_store.demo")
    >>> handler = SinkHandler(BufferSink(buffer))
    >>> demo.addHandler(handler)
    >>> demo.warning("disk almost full")
    >>> demo.removeHandler(handler)
    >>> buffer.snapshot()[0].message
    'disk almost full'
    """

    def __init__(self, sink: LogSinkPort, *, level: int = logging.NOTSET, id_provider: Callable[[], str] | None = None) -> None:
        super().__init__(level=level)
        self.sink = sink
        self._id_provider = id_provider or _new_uuid

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = event_from_record(record, event_id=self._id_provider())
            self.sink.accept(event)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            self.sink.close()
        finally:
            super().close()


def install_trace_level() -> None:
    """Register the ``TRACE`` name for :data:`TRACE_LEVEL_NUM` with :mod:`logging`."""

    logging.addLevelName(TRACE_LEVEL_NUM, LogLevel.TRACE.name)


__all__ = ["SinkHandler", "event_from_record", "install_trace_level"]
