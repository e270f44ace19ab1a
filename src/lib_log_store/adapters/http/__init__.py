"""HTTP adapter serving the log store with FastAPI."""

from __future__ import annotations

from .app import BASE_PATH, create_app

__all__ = ["BASE_PATH", "create_app"]
