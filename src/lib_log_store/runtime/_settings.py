"""Runtime settings resolved from keyword arguments and the environment.

Environment variables win over keyword arguments so deployments can override
defaults baked into host code; see :func:`build_runtime_settings`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from lib_log_store.domain.bounded_buffer import DEFAULT_CAPACITY

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_BASE_URL = "http://localhost:8080/logstore"


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Fully resolved configuration consumed by :func:`build_runtime`."""

    enable_buffer: bool = True
    buffer_capacity: int = DEFAULT_CAPACITY
    buffer_export_path: Path | None = None
    remote_url: str | None = None
    remote_timeout: float = 15.0
    remote_queue_maxsize: int = 2048
    console: bool = False
    force_color: bool = False
    no_color: bool = False
    diagnostic_hook: DiagnosticHook = None


def _env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> _ = os.environ.pop('LOG_STORE_EXAMPLE_BOOL', None)
    >>> _env_bool('LOG_STORE_EXAMPLE_BOOL', default=True)
    True
    >>> os.environ['LOG_STORE_EXAMPLE_BOOL'] = '0'
    >>> _env_bool('LOG_STORE_EXAMPLE_BOOL', default=True)
    False
    >>> _ = os.environ.pop('LOG_STORE_EXAMPLE_BOOL')
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got {value!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_str(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def build_runtime_settings(
    *,
    enable_buffer: bool = True,
    buffer_capacity: int = DEFAULT_CAPACITY,
    buffer_export_path: str | Path | None = None,
    remote_url: str | None = None,
    remote_timeout: float = 15.0,
    remote_queue_maxsize: int = 2048,
    console: bool = False,
    force_color: bool = False,
    no_color: bool = False,
    diagnostic_hook: DiagnosticHook = None,
) -> RuntimeSettings:
    """Merge keyword arguments with ``LOG_STORE_*`` environment overrides."""

    export_path = _env_str("LOG_STORE_BUFFER_EXPORT", str(buffer_export_path) if buffer_export_path else None)
    capacity = _env_int("LOG_STORE_BUFFER_CAPACITY", buffer_capacity)
    if capacity < 0:
        raise ValueError("LOG_STORE_BUFFER_CAPACITY cannot be negative")
    timeout = _env_float("LOG_STORE_REMOTE_TIMEOUT", remote_timeout)
    if timeout <= 0:
        raise ValueError("LOG_STORE_REMOTE_TIMEOUT must be positive")
    return RuntimeSettings(
        enable_buffer=_env_bool("LOG_STORE_ENABLE_BUFFER", enable_buffer),
        buffer_capacity=capacity,
        buffer_export_path=Path(export_path) if export_path else None,
        remote_url=_env_str("LOG_STORE_REMOTE_URL", remote_url),
        remote_timeout=timeout,
        remote_queue_maxsize=remote_queue_maxsize,
        console=_env_bool("LOG_STORE_CONSOLE", console),
        force_color=force_color,
        no_color=no_color,
        diagnostic_hook=diagnostic_hook,
    )


def resolve_server_address(host: str | None = None, port: int | None = None) -> tuple[str, int]:
    """Return the ``serve`` address, falling back to ``LOG_STORE_HOST``/``LOG_STORE_PORT``."""

    resolved_host = host or _env_str("LOG_STORE_HOST", DEFAULT_HOST) or DEFAULT_HOST
    resolved_port = port if port is not None else _env_int("LOG_STORE_PORT", DEFAULT_PORT)
    return resolved_host, resolved_port


def resolve_base_url(url: str | None = None) -> str:
    """Return the client base URL, falling back to ``LOG_STORE_URL``."""

    return (url or _env_str("LOG_STORE_URL", DEFAULT_BASE_URL) or DEFAULT_BASE_URL).rstrip("/")


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DiagnosticHook",
    "RuntimeSettings",
    "build_runtime_settings",
    "resolve_base_url",
    "resolve_server_address",
]
