"""Use case removing every stored event."""

from __future__ import annotations

import logging
from typing import Callable

from lib_log_store.application.ports import EventStorePort, MetricsExporterPort

logger = logging.getLogger(__name__)


def create_clear_events(
    *,
    store: EventStorePort,
    metrics: MetricsExporterPort | None = None,
) -> Callable[[], None]:
    """Return a callable that empties ``store``; it always succeeds."""

    def clear() -> None:
        store.clear()
        if metrics is not None:
            metrics.increment("store.cleared")
        logger.debug("store cleared")

    return clear


__all__ = ["create_clear_events"]
