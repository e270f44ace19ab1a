"""Rich-powered console sink implementing :class:`LogSinkPort`.

Purpose
-------
Echo accepted events to an interactive terminal with per-level styling.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleSink` - sink constructed by the runtime when console
  echo is enabled.
"""

from __future__ import annotations

from typing import Mapping, MutableMapping

from rich.console import Console

from lib_log_store.application.ports.sink import SinkClosedError
from lib_log_store.domain.events import LogEvent, format_instant
from lib_log_store.domain.levels import LogLevel


_STYLE_MAP: Mapping[LogLevel, str] = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "bold red",
}

#: Default Rich styles keyed by :class:`LogLevel` severity.


class RichConsoleSink:
    """Render accepted events using Rich formatting with style overrides."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: MutableMapping[LogLevel | str, str] | None = None,
    ) -> None:
        """Configure the console sink with colour and style overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color, no_color=no_color)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            level = LogLevel.from_name(key) if isinstance(key, str) else key
            merged[level] = value
        self._style_map = merged
        self._closed = False

    def accept(self, event: LogEvent) -> None:
        """Print ``event`` using Rich.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> from io import StringIO
        >>> event = LogEvent('id', 'msg', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc), 'main', 'svc', LogLevel.INFO)
        >>> console = Console(file=StringIO(), record=True)
        >>> RichConsoleSink(console=console).accept(event)
        >>> 'msg' in console.export_text()
        True
        """
        if self._closed:
            raise SinkClosedError("Cannot append to a closed sink")
        style = "" if self._no_color else self._style_map.get(event.level, "")
        self._console.print(self._format_line(event), style=style, highlight=False, markup=False)
        if event.error_details:
            self._console.print(event.error_details, style="dim", highlight=False, markup=False)

    def close(self) -> None:
        self._closed = True

    @staticmethod
    def _format_line(event: LogEvent) -> str:
        """Return a human-friendly console line for ``event``.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> event = LogEvent('id', 'msg', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc), 'main', 'svc', LogLevel.WARN)
        >>> RichConsoleSink._format_line(event)
        '2025-09-30T12:00:00Z ⚠     WARN svc [main] - msg'
        """
        return f"{format_instant(event.timestamp)} {event.level.icon} {event.level.name:>8} {event.logger} [{event.thread}] - {event.message}"


__all__ = ["RichConsoleSink"]
