"""FastAPI application exposing the log store over HTTP.

Purpose
-------
Translate HTTP requests under ``/logstore`` into runtime use case calls and
map their outcomes to status codes.

Contents
--------
* :func:`create_app` - application factory bound to one runtime.
* :data:`BASE_PATH` - URL prefix of every route.

System Role
-----------
Outermost adapter. Failures are returned as ``text/plain`` bodies carrying the
error message; successful reads return JSON or the rendered report.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from lib_log_store import __init__conf__
from lib_log_store.domain.errors import DuplicateId, LogStoreError, MissingParameter
from lib_log_store.domain.report import StatsFormat
from lib_log_store.runtime import LogStoreRuntime

logger = logging.getLogger(__name__)

BASE_PATH = "/logstore"

_STATS_ROUTES: tuple[tuple[str, StatsFormat, str], ...] = (
    ("csv", StatsFormat.CSV, "stats.csv"),
    ("html", StatsFormat.HTML, "stats.html"),
    ("excel", StatsFormat.XLSX, "stats.xlsx"),
)


def _error(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


def _is_json_content_type(value: str | None) -> bool:
    return value is not None and "application/json" in value.lower()


def create_app(
    runtime: LogStoreRuntime,
    *,
    on_shutdown: Callable[[], None] | None = None,
) -> FastAPI:
    """Build a FastAPI application serving ``runtime``.

    ``on_shutdown`` runs when the ASGI lifespan ends; the CLI passes
    :func:`lib_log_store.runtime.shutdown` so the buffer export and sink
    teardown happen when the server stops.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("log store service started (buffer=%s)", runtime.buffer is not None)
        yield
        if on_shutdown is not None:
            on_shutdown()
        logger.info("log store service stopped")

    app = FastAPI(
        title="lib_log_store",
        version=__init__conf__.version,
        description="Log event ingestion and query service",
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    @app.exception_handler(LogStoreError)
    async def _handle_log_store_error(_request: Request, exc: LogStoreError) -> Response:
        status = 409 if isinstance(exc, DuplicateId) else 400
        return _error(status, exc.message)

    router = APIRouter(prefix=BASE_PATH)

    @router.post("/logs")
    async def post_log(request: Request) -> Response:
        """Ingest one event; 201 stored, 409 duplicate, 400 otherwise."""
        if not _is_json_content_type(request.headers.get("content-type")):
            return _error(400, "Content-Type must be application/json")
        body = await request.body()
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return _error(400, "Invalid JSON format")
        if not isinstance(payload, dict):
            return _error(400, "Invalid JSON format")
        result = await run_in_threadpool(runtime.ingest, payload)
        if result["ok"]:
            return Response(status_code=201)
        if result["reason"] == DuplicateId.kind:
            return _error(409, result["message"])
        return _error(400, result["message"])

    @router.get("/logs")
    def get_logs(limit: str | None = None, level: str | None = None) -> Response:
        """Return up to ``limit`` events at or above ``level``, newest first."""
        if limit is None:
            raise MissingParameter("limit")
        if level is None:
            raise MissingParameter("level")
        events = runtime.query_engine.query(level, limit)
        return JSONResponse([event.to_dict() for event in events])

    @router.delete("/logs")
    def delete_logs() -> Response:
        """Remove every stored event."""
        runtime.clear()
        return Response(status_code=200)

    for route_name, stats_format, filename in _STATS_ROUTES:
        router.add_api_route(
            f"/stats/{route_name}",
            _make_stats_endpoint(runtime, stats_format, filename),
            methods=["GET"],
            name=f"stats_{route_name}",
        )

    @router.get("/metrics")
    def get_metrics() -> dict[str, Any]:
        """Return the in-memory counters and gauges."""
        snapshot = runtime.metrics.snapshot()
        return {"counters": dict(snapshot["counters"]), "gauges": dict(snapshot["gauges"])}

    app.include_router(router)
    return app


def _make_stats_endpoint(runtime: LogStoreRuntime, stats_format: StatsFormat, filename: str) -> Callable[[], Response]:
    def endpoint() -> Response:
        content = runtime.renderer.render(runtime.aggregator.aggregate(), stats_format=stats_format)
        headers = {"Content-Disposition": f'attachment; filename="{filename}"'} if stats_format.is_binary else None
        return Response(content=content, media_type=stats_format.media_type, headers=headers)

    endpoint.__doc__ = f"Render logger × level statistics as {stats_format.value}."
    return endpoint


__all__ = ["BASE_PATH", "create_app"]
