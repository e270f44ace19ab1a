"""Shutdown orchestration for the log store.

Purpose
-------
Provide a unified shutdown routine that optionally exports the bounded
buffer and then closes every sink.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from lib_log_store.application.ports.sink import LogSinkPort
from lib_log_store.domain import BoundedBuffer

logger = logging.getLogger(__name__)


def create_shutdown(
    *,
    sinks: Sequence[LogSinkPort],
    buffer: BoundedBuffer | None = None,
    export_path: Path | None = None,
) -> Callable[[], None]:
    """Return a callable performing the shutdown sequence."""

    def shutdown() -> None:
        """Export buffered events when configured, then close sinks in order."""
        if buffer is not None and export_path is not None:
            buffer.export(export_path)
            logger.info("exported %d buffered events to %s", len(buffer), export_path)
        for sink in sinks:
            sink.close()

    return shutdown


__all__ = ["create_shutdown"]
