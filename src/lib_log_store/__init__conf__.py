"""Static package metadata surfaced by the CLI ``info`` command and the HTTP app."""

from __future__ import annotations

from typing import Callable

name = "lib_log_store"
title = "Log event ingestion, storage, query and statistics service"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_store"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_store"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner, one ``\\n``-terminated line per call.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_store:\\n'
    """

    emit = writer if writer is not None else (lambda text: print(text, end=""))
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n")
    emit("\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")


def summary_info() -> str:
    """Return the metadata banner as a single string."""

    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)


__all__ = ["print_info", "shell_command", "summary_info", "version"]
