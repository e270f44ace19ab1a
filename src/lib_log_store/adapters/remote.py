"""Remote-forwarding sink posting events to another log store over HTTP.

Purpose
-------
Forward accepted events as wire-format JSON to the ingestion endpoint of a
(possibly remote) log store.

Contents
--------
* :data:`DEFAULT_URL` - development endpoint.
* :class:`RemoteSink` - httpx-backed implementation of :class:`LogSinkPort`.

System Role
-----------
Logging failures must never stop the producing application, so delivery
errors are counted and logged instead of raised. Wrap the sink in
:class:`lib_log_store.adapters.queue.QueuedSink` to keep the HTTP round trip
off the caller's thread.
"""

from __future__ import annotations

import logging
import threading

import httpx

from lib_log_store.application.ports.sink import SinkClosedError
from lib_log_store.domain.events import LogEvent

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8080/logstore/logs"

_SUCCESS_STATUSES = frozenset({200, 201})


class RemoteSink:
    """POST each accepted event to ``url``.

    Parameters
    ----------
    url:
        Ingestion endpoint of the receiving log store.
    client:
        Optional pre-configured :class:`httpx.Client`; one is created (and
        later closed) when omitted.
    timeout:
        Request timeout in seconds for the owned client.
    """

    def __init__(self, url: str = DEFAULT_URL, *, client: httpx.Client | None = None, timeout: float = 15.0) -> None:
        self.url = url
        self._owns_client = client is None
        self._client: httpx.Client | None = client if client is not None else httpx.Client(timeout=timeout)
        self._success = 0
        self._failure = 0
        self._lock = threading.Lock()

    @property
    def success_count(self) -> int:
        return self._success

    @property
    def failure_count(self) -> int:
        return self._failure

    @property
    def closed(self) -> bool:
        return self._client is None

    def accept(self, event: LogEvent) -> None:
        client = self._client
        if client is None:
            raise SinkClosedError("Cannot append to a closed sink")
        try:
            response = client.post(
                self.url,
                content=event.to_json(),
                headers={"Content-Type": "application/json"},
            )
        except httpx.ConnectError:
            self._record_failure()
            logger.warning("RemoteSink: server not available at %s", self.url)
            return
        except httpx.HTTPError as exc:
            self._record_failure()
            logger.warning("RemoteSink: %s", exc)
            return
        if response.status_code in _SUCCESS_STATUSES:
            with self._lock:
                self._success += 1
            return
        self._record_failure()
        logger.warning("RemoteSink: server returned status %d - %s", response.status_code, response.text)

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None and self._owns_client:
            client.close()

    def _record_failure(self) -> None:
        with self._lock:
            self._failure += 1


__all__ = ["DEFAULT_URL", "RemoteSink"]
