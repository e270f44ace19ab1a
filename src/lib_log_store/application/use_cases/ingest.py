"""Use case orchestrating ingestion of a single raw log event.

Purpose
-------
Tie together validation, duplicate-rejecting storage, sink fan-out, and
metrics for one payload received at the network boundary.

Contents
--------
* :func:`create_ingest_event` factory returning the runtime callable.
* :func:`save_or_raise` for callers wanting :class:`DuplicateId` raised.

System Role
-----------
Application-layer orchestrator invoked by the HTTP adapter and the logging
bridge. The returned dictionaries let callers tell "stored now" from "already
recorded" from "rejected" without exception-driven branching.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from lib_log_store.application.ports import EventStorePort, LogSinkPort, MetricsExporterPort, SaveOutcome
from lib_log_store.domain.errors import DuplicateId
from lib_log_store.domain.events import LogEvent
from lib_log_store.domain.validation import EventValidator

from ._types import DiagnosticHook, ProcessResult

logger = logging.getLogger(__name__)

IngestCallable = Callable[[Mapping[str, Any]], ProcessResult]


def save_or_raise(store: EventStorePort, event: LogEvent) -> LogEvent:
    """Save ``event`` and raise :class:`DuplicateId` when the id is taken."""

    if store.save(event) is SaveOutcome.DUPLICATE:
        raise DuplicateId(event.event_id)
    return event


def create_ingest_event(
    *,
    validator: EventValidator,
    store: EventStorePort,
    sinks: Sequence[LogSinkPort] = (),
    metrics: MetricsExporterPort | None = None,
    diagnostic: DiagnosticHook = None,
) -> IngestCallable:
    """Build the ingestion callable capturing the current dependency wiring.

    Why
    ---
    The composition root assembles a different set of sinks depending on
    configuration. This factory freezes those decisions into one callable
    executed for every payload.

    Parameters
    ----------
    validator:
        :class:`EventValidator` normalising raw payloads.
    store:
        Authoritative :class:`EventStorePort`.
    sinks:
        Secondary destinations offered every newly stored event. Duplicates
        and rejected payloads never reach them.
    metrics:
        Optional :class:`MetricsExporterPort` receiving outcome counters.
    diagnostic:
        Optional callback invoked with pipeline milestones.

    Returns
    -------
    Callable[[Mapping[str, Any]], dict[str, Any]]
        Function accepting a decoded JSON object and returning a diagnostic
        dictionary with at least an ``ok`` key.

    Examples
    --------
    >>> from lib_log_store.adapters.memory_store import InMemoryEventStore
    >>> store = InMemoryEventStore()
    >>> ingest = create_ingest_event(validator=EventValidator(), store=store)
    >>> payload = {
    ...     "id": "123e4567-e89b-12d3-a456-426614174000", "message": "hello",
    ...     "timestamp": "2025-09-30T12:00:00Z", "thread": "main",
    ...     "logger": "svc", "level": "warn",
    ... }
    >>> ingest(payload)["outcome"]
    'stored'
    >>> ingest(payload)["reason"]
    'duplicate_id'
    >>> ingest({"message": "x"})["reason"]
    'missing_field'
    """

    toolkit = _IngestToolkit(
        validator=validator,
        store=store,
        sinks=tuple(sinks),
        metrics=metrics,
        emit=_create_diagnostic_emitter(diagnostic),
    )
    return _IngestPipeline(toolkit)


@dataclass(frozen=True)
class _IngestToolkit:
    validator: EventValidator
    store: EventStorePort
    sinks: tuple[LogSinkPort, ...]
    metrics: MetricsExporterPort | None
    emit: Callable[[str, dict[str, Any]], None]


class _IngestPipeline:
    def __init__(self, toolkit: _IngestToolkit) -> None:
        self._toolkit = toolkit

    def __call__(self, payload: Mapping[str, Any]) -> ProcessResult:
        result = self._toolkit.validator.validate(payload)
        if result.error is not None:
            return _reject(self._toolkit, result.error.kind, result.error.message)
        event = result.unwrap()
        if self._toolkit.store.save(event) is SaveOutcome.DUPLICATE:
            return _report_duplicate(self._toolkit, event)
        _count(self._toolkit, "events.stored")
        _fan_out(self._toolkit, event)
        self._toolkit.emit("stored", {"event_id": event.event_id, "logger": event.logger, "level": event.level.name})
        return {"ok": True, "event_id": event.event_id, "outcome": SaveOutcome.STORED.value}


def _create_diagnostic_emitter(
    diagnostic: DiagnosticHook,
) -> Callable[[str, dict[str, Any]], None]:
    if diagnostic is None:
        return lambda name, payload: None

    def emit(name: str, payload: dict[str, Any]) -> None:
        try:
            diagnostic(name, payload)
        except Exception:  # diagnostics must not change ingestion outcomes
            logger.exception("diagnostic hook failed for %s", name)

    return emit


def _count(toolkit: _IngestToolkit, name: str) -> None:
    if toolkit.metrics is not None:
        toolkit.metrics.increment(name)


def _reject(toolkit: _IngestToolkit, kind: str, message: str) -> ProcessResult:
    _count(toolkit, f"events.rejected.{kind}")
    logger.debug("rejected payload: %s", message)
    toolkit.emit("rejected", {"reason": kind, "message": message})
    return {"ok": False, "reason": kind, "message": message}


def _report_duplicate(toolkit: _IngestToolkit, event: LogEvent) -> ProcessResult:
    _count(toolkit, "events.duplicate")
    error = DuplicateId(event.event_id)
    logger.debug("duplicate event id %s", event.event_id)
    toolkit.emit("duplicate", {"event_id": event.event_id})
    return {"ok": False, "reason": error.kind, "message": error.message, "event_id": event.event_id}


def _fan_out(toolkit: _IngestToolkit, event: LogEvent) -> None:
    for sink in toolkit.sinks:
        try:
            sink.accept(event)
        except Exception:
            _count(toolkit, "sinks.errors")
            logger.warning("sink %s failed for event %s", type(sink).__name__, event.event_id, exc_info=True)


__all__ = ["IngestCallable", "create_ingest_event", "save_or_raise"]
