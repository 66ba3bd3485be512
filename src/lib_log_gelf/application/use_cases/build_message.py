"""Conversion of log entries into GELF messages.

Purpose
-------
Hold the field-naming policy, the level coarsening table, the optional-field
inclusion rules, and the stack-trace rendering used for every entry.

Contents
--------
* :data:`_LEVEL_MAP` - :class:`LogLevel` to :class:`GelfLevel` table.
* :func:`to_gelf_level` - total mapping raising on unmapped levels.
* :func:`render_stack_trace` - frame rendering for captured errors.
* :func:`build_gelf_message` - entry to message conversion.

System Role
-----------
Pure function layer called by :class:`~lib_log_gelf.writer.GelfWriter`; it
touches no shared mutable state, so concurrent callers need no locking.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lib_log_gelf.domain.entries import NO_LINE_NUMBER, CapturedError, LogEntry
from lib_log_gelf.domain.errors import UnknownLevelError
from lib_log_gelf.domain.levels import GelfLevel, LogLevel
from lib_log_gelf.domain.messages import GelfMessage

_LEVEL_MAP = {
    LogLevel.TRACE: GelfLevel.DEBUG,
    LogLevel.DEBUG: GelfLevel.DEBUG,
    LogLevel.INFO: GelfLevel.INFO,
    LogLevel.WARNING: GelfLevel.WARNING,
    LogLevel.ERROR: GelfLevel.ERROR,
}


def to_gelf_level(level: LogLevel) -> GelfLevel:
    """Coarsen ``level`` into the GELF severity.

    Examples
    --------
    >>> to_gelf_level(LogLevel.TRACE) is GelfLevel.DEBUG
    True
    """
    try:
        return _LEVEL_MAP[level]
    except (KeyError, TypeError) as exc:
        raise UnknownLevelError(f"Invalid log level {level!r}") from exc


def render_stack_trace(error: CapturedError) -> str:
    """Join the error's frames, in their given order, one per line."""

    return "\n".join(frame.render() for frame in error.frames)


def build_gelf_message(entry: LogEntry, *, hostname: str, static_fields: Mapping[str, Any]) -> GelfMessage:
    """Convert ``entry`` into a :class:`GelfMessage`.

    Parameters
    ----------
    entry:
        Log entry to convert.
    hostname:
        Originating host recorded on the message.
    static_fields:
        Constant fields merged into every message. The mapping is copied so
        per-message fields never leak back into the configuration.

    Raises
    ------
    UnknownLevelError
        When ``entry.level`` is outside the mapping table.
    """

    level = to_gelf_level(entry.level)
    fields: dict[str, Any] = dict(static_fields)

    if entry.process_id is not None:
        fields["processId"] = entry.process_id

    thread = entry.thread
    if thread is not None:
        fields["threadName"] = thread.name
        if thread.group is not None:
            fields["threadGroup"] = thread.group
        if thread.priority is not None:
            fields["threadPriority"] = thread.priority

    if entry.class_name is not None:
        fields["sourceClassName"] = entry.class_name
    if entry.method_name is not None:
        fields["sourceMethodName"] = entry.method_name
    if entry.file_name is not None:
        fields["sourceFileName"] = entry.file_name
    if entry.line_number != NO_LINE_NUMBER:
        fields["sourceLineNumber"] = entry.line_number

    full_message: str | None = None
    error = entry.error
    if error is not None:
        stack_trace = render_stack_trace(error)
        fields["exceptionClass"] = error.type_name
        fields["exceptionMessage"] = error.message
        fields["exceptionStackTrace"] = stack_trace
        full_message = f"{entry.rendered_text}\n\n{stack_trace}"

    return GelfMessage(
        short_message=entry.rendered_text,
        host=hostname,
        level=level,
        timestamp=entry.timestamp / 1000,
        full_message=full_message,
        additional_fields=fields,
    )


__all__ = ["build_gelf_message", "render_stack_trace", "to_gelf_level"]
