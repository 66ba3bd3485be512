"""Static package metadata surfaced by the CLI banner."""

from __future__ import annotations

from typing import Callable

name = "lib_log_gelf"
title = "Ship log entries to Graylog as GELF messages"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_gelf"
author = "bitranox"
shell_command = "lib_log_gelf"


def _stdout(text: str) -> None:
    print(text, end="")


def print_info(writer: Callable[[str], None] = _stdout) -> None:
    """Emit the metadata banner through ``writer`` (one call per line)."""

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    writer(f"Info for {name}:\n\n")
    for label, value in fields:
        writer(f"    {label:<{pad}} = {value}\n")
