"""Optional ``.env`` loading for the CLI and host applications.

Purpose
-------
Let operators keep ``LOG_STORE_*`` settings in a ``.env`` file next to the
working directory. Values already present in the process environment always
win over file entries.

Contents
--------
* :data:`DOTENV_ENV_VAR` - environment toggle for automatic loading.
* :func:`should_use_dotenv` - resolve CLI flag versus environment toggle.
* :func:`enable_dotenv` - locate and load the nearest ``.env`` once.
"""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LOG_STORE_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_LOADED_PATH: Path | None = None
_LOADED = False
_LOCK = Lock()


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Return whether ``.env`` loading is requested.

    An explicit CLI choice wins; otherwise the environment toggle decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(explicit=None, env_value=None)
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search walks upwards from ``search_from`` (default: the current
    working directory). Returns the resolved file path, or ``None`` when no
    file was found. Repeated calls return the first result without reloading.
    """

    global _LOADED, _LOADED_PATH
    with _LOCK:
        if _LOADED:
            return _LOADED_PATH
        if search_from is not None:
            candidate = _find_upwards(search_from)
        else:
            found = find_dotenv(usecwd=True)
            candidate = Path(found).resolve() if found else None
        if candidate is not None:
            load_dotenv(candidate, override=False)
            logger.debug("loaded environment from %s", candidate)
        _LOADED = True
        _LOADED_PATH = candidate
        return candidate


def _find_upwards(start: Path) -> Path | None:
    directory = start.resolve()
    for folder in (directory, *directory.parents):
        env_file = folder / ".env"
        if env_file.is_file():
            return env_file
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED, _LOADED_PATH
    with _LOCK:
        _LOADED = False
        _LOADED_PATH = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
