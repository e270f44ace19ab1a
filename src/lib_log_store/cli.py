"""Click command group for serving, downloading, and summarising logs.

Purpose
-------
Provide the ``lib_log_store`` console script: run the HTTP service, fetch
statistics reports from a running service, and render statistics offline for
a JSON-lines file of events.

Contents
--------
* :func:`cli` - root group with traceback and ``.env`` toggles.
* ``info`` / ``serve`` / ``download`` / ``stats`` subcommands.
* :func:`main` - entry point delegating to :func:`lib_cli_exit_tools.run_cli`.

System Role
-----------
Presentation layer. Commands delegate to the runtime façade and adapters; no
business rule lives here.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Sequence, cast

import click
import httpx
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from .adapters.memory_store import InMemoryEventStore
from .adapters.report import StatsReportAdapter
from .application.use_cases import StatsAggregator, create_ingest_event
from .domain import EventValidator, StatsFormat
from .runtime._settings import resolve_base_url, resolve_server_address

logger = logging.getLogger(__name__)

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_DOWNLOAD_FORMATS = {"csv": "csv", "excel": "excel", "html": "html"}


def _create_http_client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout, follow_redirects=True)


@click.group(help=__init__conf__.title, context_settings=CLICK_CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from the nearest .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags and loading ``.env`` when requested."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()
    if ctx.invoked_subcommand is None:
        ctx.invoke(cli_info)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("serve", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--host", default=None, help="Bind address (default: LOG_STORE_HOST or 127.0.0.1).")
@click.option("--port", type=int, default=None, help="Bind port (default: LOG_STORE_PORT or 8080).")
@click.option("--buffer-capacity", type=int, default=None, help="Recent-events buffer capacity.")
@click.option("--remote-url", default=None, help="Forward stored events to another log store.")
@click.option("--console/--no-console", default=False, help="Echo stored events to the terminal.")
@click.option("--log-level", default="info", show_default=True, help="uvicorn log level.")
def cli_serve(
    host: str | None,
    port: int | None,
    buffer_capacity: int | None,
    remote_url: str | None,
    console: bool,
    log_level: str,
) -> None:
    """Run the HTTP service until interrupted."""

    import uvicorn

    from . import runtime
    from .adapters.http import create_app

    bind_host, bind_port = resolve_server_address(host, port)
    active = runtime.init(buffer_capacity=buffer_capacity, remote_url=remote_url, console=console)
    app = create_app(active, on_shutdown=runtime.shutdown)
    click.echo(f"Serving log store on http://{bind_host}:{bind_port}/logstore")
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=log_level)


@cli.command("download", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("report", type=click.Choice(sorted(_DOWNLOAD_FORMATS), case_sensitive=False))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--url", default=None, help="Service base URL (default: LOG_STORE_URL).")
@click.option("--timeout", type=float, default=15.0, show_default=True, help="Request timeout in seconds.")
def cli_download(report: str, target: Path, url: str | None, timeout: float) -> None:
    """Fetch a statistics REPORT from a running service and write it to TARGET."""

    endpoint = f"{resolve_base_url(url)}/stats/{_DOWNLOAD_FORMATS[report.lower()]}"
    logger.debug("downloading %s report from %s", report, endpoint)
    with _create_http_client(timeout) as client:
        try:
            response = client.get(endpoint)
        except httpx.HTTPError as exc:
            raise click.ClickException(f"Request to {endpoint} failed: {exc}") from exc
    if response.status_code != 200:
        raise click.ClickException(f"{endpoint} returned HTTP {response.status_code}")
    target.write_bytes(response.content)
    click.echo(f"Wrote {len(response.content)} bytes to {target}")


@cli.command("stats", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "stats_format",
    type=click.Choice([fmt.value for fmt in StatsFormat] + ["excel"], case_sensitive=False),
    default=StatsFormat.TEXT.value,
    show_default=True,
    help="Report encoding.",
)
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the report to a file.")
@click.option("--color/--no-color", default=False, help="Colourise the text report.")
def cli_stats(events_file: Path, stats_format: str, output: Path | None, color: bool) -> None:
    """Render logger × level statistics for a JSON-lines EVENTS_FILE.

    Each non-blank line must hold one event object in wire format. Invalid or
    duplicate lines are skipped and reported on stderr.
    """

    fmt = StatsFormat.from_name(stats_format)
    if fmt.is_binary and output is None:
        raise click.UsageError("--output is required for binary report formats")

    store = InMemoryEventStore()
    ingest = create_ingest_event(validator=EventValidator(), store=store)
    skipped = 0
    with events_file.open(encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                skipped += 1
                click.echo(f"line {number}: Invalid JSON format", err=True)
                continue
            result = ingest(payload)
            if not result["ok"]:
                skipped += 1
                click.echo(f"line {number}: {result['message']}", err=True)

    matrix = StatsAggregator(store).aggregate()
    content = StatsReportAdapter().render(matrix, stats_format=fmt, path=output, colorize=color)
    if output is None:
        text = cast(str, content)
        click.echo(text, nl=not text.endswith("\n"))
    else:
        click.echo(f"Wrote {fmt.value} report for {len(store)} events to {output}")
    if skipped:
        click.echo(f"skipped {skipped} line(s)", err=True)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI with :func:`lib_cli_exit_tools.run_cli` and return the exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    unless ``restore_traceback`` is ``False``.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
