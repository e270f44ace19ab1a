"""Protocols separating the use cases from adapters."""

from __future__ import annotations

from .metrics import MetricsExporterPort
from .report import StatsRendererPort
from .sink import LogSinkPort, SinkClosedError
from .store import EventStorePort, SaveOutcome
from .time import ClockPort, IdProvider

__all__ = [
    "ClockPort",
    "EventStorePort",
    "IdProvider",
    "LogSinkPort",
    "MetricsExporterPort",
    "SaveOutcome",
    "SinkClosedError",
    "StatsRendererPort",
]
