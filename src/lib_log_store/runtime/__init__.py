"""Runtime façade that wires the clean-architecture log store.

Purpose
-------
Expose a stable entry point (``init``, ``ingest``, ``query``, ``stats``,
``clear``, ``shutdown``) that host applications and the HTTP adapter use
instead of importing the inner layers directly.

Contents
--------
* ``init`` - composition root assembling store, buffer, sinks, and use cases.
* ``ingest`` / ``query`` / ``stats`` / ``clear`` - thin delegates to the
  active runtime.
* ``shutdown`` - deterministic teardown path.
* ``inspect_runtime`` - read-only snapshot for diagnostics.

System Role
-----------
Forms the outer shell: high-level policy depends only on abstractions while
adapters stay hidden behind this interface.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from lib_log_store.application.ports import ClockPort, EventStorePort, IdProvider
from lib_log_store.application.use_cases._types import ProcessResult
from lib_log_store.domain import LogEvent, LogLevel, StatsFormat

from ._composition import build_runtime
from ._settings import DiagnosticHook, RuntimeSettings, build_runtime_settings
from ._state import LogStoreRuntime, clear_runtime, current_runtime, is_initialised, set_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active log store runtime."""

    stored_events: int
    buffer_enabled: bool
    buffer_capacity: int | None
    buffered_events: int
    discarded_events: int
    sinks: tuple[str, ...]
    started_at: datetime


def init(
    *,
    enable_buffer: bool = True,
    buffer_capacity: int | None = None,
    buffer_export_path: str | Path | None = None,
    remote_url: str | None = None,
    remote_timeout: float = 15.0,
    console: bool = False,
    force_color: bool = False,
    no_color: bool = False,
    diagnostic_hook: DiagnosticHook = None,
    store: EventStorePort | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
) -> LogStoreRuntime:
    """Compose the log store runtime and install it as the active singleton.

    Why
    ---
    Hosts call ``init`` once during startup. Centralising composition here
    keeps the HTTP adapter and CLI free of wiring decisions.

    Inputs
    ------
    enable_buffer, buffer_capacity, buffer_export_path:
        Recent-events buffer toggle, size, and optional JSON export target
        written on shutdown.
    remote_url, remote_timeout:
        Forward stored events to another log store through a queued
        :class:`RemoteSink`.
    console, force_color, no_color:
        Echo stored events to the terminal via Rich.
    store, clock, id_provider:
        Optional collaborators overriding the in-memory defaults.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a runtime is already active.
    ``LOG_STORE_*`` environment variables override the keyword arguments.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_store.init() cannot be called twice without shutdown(); call lib_log_store.shutdown() first",
        )
    settings_kwargs: dict[str, Any] = {
        "enable_buffer": enable_buffer,
        "buffer_export_path": buffer_export_path,
        "remote_url": remote_url,
        "remote_timeout": remote_timeout,
        "console": console,
        "force_color": force_color,
        "no_color": no_color,
        "diagnostic_hook": diagnostic_hook,
    }
    if buffer_capacity is not None:
        settings_kwargs["buffer_capacity"] = buffer_capacity
    settings = build_runtime_settings(**settings_kwargs)
    runtime = build_runtime(settings, store=store, clock=clock, id_provider=id_provider)
    set_runtime(runtime)
    return runtime


def ingest(payload: Mapping[str, Any]) -> ProcessResult:
    """Validate and store ``payload`` through the active runtime."""

    return current_runtime().ingest(payload)


def query(level: LogLevel | str, limit: Any) -> list[LogEvent]:
    """Return up to ``limit`` stored events passing ``level``, newest first."""

    return current_runtime().query_engine.query(level, limit)


def stats(*, stats_format: StatsFormat | str = StatsFormat.TEXT, path: str | Path | None = None, color: bool = False) -> str | bytes:
    """Render the logger × level statistics of the active runtime."""

    runtime = current_runtime()
    fmt = stats_format if isinstance(stats_format, StatsFormat) else StatsFormat.from_name(stats_format)
    target = Path(path) if path is not None else None
    return runtime.renderer.render(runtime.aggregator.aggregate(), stats_format=fmt, path=target, colorize=color)


def clear() -> None:
    """Remove every stored event."""

    current_runtime().clear()


def shutdown() -> None:
    """Export the buffer when configured, close sinks, and clear runtime state.

    Side Effects
    ------------
    Raises :class:`RuntimeError` when no runtime is active. Runtime state is
    cleared even when a sink fails to close.
    """

    runtime = current_runtime()
    try:
        runtime.shutdown()
    finally:
        clear_runtime()


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    buffer = runtime.buffer
    return RuntimeSnapshot(
        stored_events=len(runtime.store.all()),
        buffer_enabled=buffer is not None,
        buffer_capacity=buffer.capacity if buffer is not None else None,
        buffered_events=len(buffer) if buffer is not None else 0,
        discarded_events=buffer.discarded_count if buffer is not None else 0,
        sinks=tuple(type(sink).__name__ for sink in runtime.sinks),
        started_at=runtime.started_at,
    )


__all__ = [
    "LogStoreRuntime",
    "RuntimeSettings",
    "RuntimeSnapshot",
    "build_runtime",
    "build_runtime_settings",
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
