"""Shared type aliases for the use-case layer."""

from __future__ import annotations

from typing import Any, Callable, Dict

ProcessResult = Dict[str, Any]
"""Diagnostic dictionary returned by ingestion (``ok`` plus details)."""

DiagnosticHook = Callable[[str, Dict[str, Any]], None] | None

__all__ = ["DiagnosticHook", "ProcessResult"]
