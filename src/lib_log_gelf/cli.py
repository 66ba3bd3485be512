"""Click command line interface.

Purpose
-------
Offer a metadata banner and a smoke-test command that sends one sample
message per level to a GELF server, so operators can verify connectivity and
field mapping without writing code.

Contents
--------
* :func:`cli` - command group with ``--use-dotenv`` and ``--version``.
* :func:`info` / :func:`send` - subcommands.
* :func:`main` - test-friendly runner returning an exit code.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Sequence

import click

from . import __init__conf__
from . import config as config_module
from .adapters.gelf_transport import TransportError, create_transport
from .domain import CapturedError, LogEntry, LogEntryValue, LogLevel, ThreadInfo
from .domain.errors import ConfigurationError, WriterInitError
from .writer import GelfWriter


def summary_info() -> str:
    """Return the metadata banner as one string ending with a newline."""

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load environment variables from a nearby .env (default: ${config_module.DOTENV_ENV_VAR}).",
)
@click.option("--version", "-V", is_flag=True, help="Print the installed version and exit.")
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None, version: bool) -> None:
    """Ship log entries to Graylog as GELF messages."""

    if config_module.should_use_dotenv(explicit=use_dotenv, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if version:
        click.echo(__init__conf__.version)
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command()
def info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command()
@click.option("--server", help="GELF server hostname (env LOG_GELF_SERVER).")
@click.option("--port", type=int, help="GELF server port (env LOG_GELF_PORT).")
@click.option("--transport", type=click.Choice(["udp", "tcp"], case_sensitive=False), help="Transport protocol.")
@click.option("--hostname", help="Application hostname recorded on messages.")
@click.option("--static-field", "static_fields", multiple=True, metavar="NAME:VALUE", help="Static field (repeatable).")
@click.option("--exception/--no-exception", "with_exception", default=True, show_default=True, help="Also send one message per level carrying an exception.")
def send(
    server: str | None,
    port: int | None,
    transport: str | None,
    hostname: str | None,
    static_fields: tuple[str, ...],
    with_exception: bool,
) -> None:
    """Send one sample message per level to the configured GELF server."""

    properties: dict[str, Any] = {"additionalLogEntryValues": [value.name for value in LogEntryValue]}
    overrides: dict[str, Any] = {}
    if server is not None:
        overrides["server"] = server
    if port is not None:
        overrides["port"] = port
    if transport is not None:
        overrides["transport"] = transport
    if hostname is not None:
        overrides["hostname"] = hostname
    if static_fields:
        overrides["staticFields"] = list(static_fields)

    try:
        config = config_module.load_writer_config(properties, overrides=overrides)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc)) from exc

    error = _sample_error() if with_exception else None
    sent = 0
    try:
        with GelfWriter(config, transport_factory=create_transport) as writer:
            for level in LogLevel:
                writer.write(_sample_entry(level, None))
                sent += 1
                if error is not None:
                    writer.write(_sample_entry(level, error))
                    sent += 1
    except WriterInitError as exc:
        raise click.ClickException(f"{exc}: {exc.__cause__}") from exc
    except TransportError as exc:
        raise click.ClickException(f"Sent {sent} message(s) before the transport failed: {exc}") from exc

    click.echo(f"Sent {sent} message(s) to {config.server}:{config.port} via {config.transport.value}")


def _sample_entry(level: LogLevel, error: CapturedError | None) -> LogEntry:
    current = threading.current_thread()
    return LogEntry(
        timestamp=int(time.time() * 1000),
        level=level,
        rendered_text=f"lib_log_gelf sample {level.severity} message",
        process_id=str(os.getpid()),
        thread=ThreadInfo(name=current.name),
        class_name=__name__,
        method_name="send",
        file_name=os.path.basename(__file__),
        error=error,
        logger_name=__name__,
    )


def _sample_error() -> CapturedError:
    try:
        raise RuntimeError("BOOM!")
    except RuntimeError as exc:
        return CapturedError.from_exception(exc)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the click group and return its exit code.

    Examples
    --------
    >>> main(["--version"])  # doctest: +ELLIPSIS
    0.1...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.exceptions.Exit as exit_:
        return exit_.exit_code
    except click.ClickException as error:
        error.show()
        return error.exit_code
    return result if isinstance(result, int) else 0


__all__ = ["cli", "main", "summary_info"]
