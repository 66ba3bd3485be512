"""Log entries handed to the writer by the host logging pipeline.

Purpose
-------
Provide immutable representations of one log call: the entry itself, the
thread it was emitted on, and any captured error with its call frames.

Contents
--------
* :class:`LogEntryValue` - attributes a writer can ask the host to populate.
* :class:`ThreadInfo`, :class:`StackFrame`, :class:`CapturedError`.
* :class:`LogEntry` - the entry consumed by :class:`~lib_log_gelf.writer.GelfWriter`.
* :data:`NO_LINE_NUMBER` - sentinel for "no line number available".

System Role
-----------
Sits in the domain layer; the stdlib bridge builds these objects from
:class:`logging.LogRecord` and the conversion use case reads them.
"""

from __future__ import annotations

import os
import traceback
from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError
from .levels import LogLevel

NO_LINE_NUMBER = -1
"""Line number sentinel meaning the call site carries no line information."""


class LogEntryValue(Enum):
    """Entry attributes a writer declares it needs populated."""

    TIMESTAMP = "timestamp"
    LEVEL = "level"
    RENDERED_TEXT = "rendered_text"
    MESSAGE = "message"
    PROCESS_ID = "process_id"
    THREAD = "thread"
    CLASS = "class"
    METHOD = "method"
    FILE = "file"
    LINE = "line"
    EXCEPTION = "exception"
    LOGGER = "logger"

    @classmethod
    def from_name(cls, name: str) -> "LogEntryValue":
        """Parse ``name`` case-insensitively, accepting legacy aliases.

        Examples
        --------
        >>> LogEntryValue.from_name("process_id") is LogEntryValue.PROCESS_ID
        True
        >>> LogEntryValue.from_name("RENDERED_LOG_ENTRY") is LogEntryValue.RENDERED_TEXT
        True
        """
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown log entry value: {name!r}") from exc


_ALIASES = {
    "DATE": "TIMESTAMP",
    "RENDERED_LOG_ENTRY": "RENDERED_TEXT",
    "PROCESSID": "PROCESS_ID",
}


BASIC_LOG_ENTRY_VALUES = frozenset({LogEntryValue.TIMESTAMP, LogEntryValue.LEVEL, LogEntryValue.RENDERED_TEXT})
"""Values every writer needs regardless of configuration."""


@dataclass(slots=True, frozen=True)
class ThreadInfo:
    """Identity of the thread that emitted an entry.

    ``group`` and ``priority`` are optional: Python threads have neither, and
    a missing group must never break message conversion.
    """

    name: str
    group: str | None = None
    priority: int | None = None


@dataclass(slots=True, frozen=True)
class StackFrame:
    """One call frame of a captured error."""

    class_name: str
    method_name: str
    file_name: str | None
    line_number: int

    def render(self) -> str:
        """Return the frame as ``<class>.<method>(<file>:<line>)``.

        Examples
        --------
        >>> StackFrame("app.jobs", "run", "jobs.py", 12).render()
        'app.jobs.run(jobs.py:12)'
        """

        return f"{self.class_name}.{self.method_name}({self.file_name}:{self.line_number})"


@dataclass(slots=True, frozen=True)
class CapturedError:
    """Error attached to an entry: type, message, and frames innermost-first."""

    type_name: str
    message: str | None = None
    frames: tuple[StackFrame, ...] = ()

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CapturedError":
        """Capture ``exc`` with its traceback frames ordered innermost-first.

        Frames use the defining module of each function as the class name so
        rendered traces read like fully-qualified call paths.
        """

        exc_type = type(exc)
        module = exc_type.__module__
        if module in (None, "builtins"):
            type_name = exc_type.__qualname__
        else:
            type_name = f"{module}.{exc_type.__qualname__}"

        frames: list[StackFrame] = []
        for frame, lineno in traceback.walk_tb(exc.__traceback__):
            code = frame.f_code
            frames.append(
                StackFrame(
                    class_name=str(frame.f_globals.get("__name__", "<unknown>")),
                    method_name=code.co_name,
                    file_name=os.path.basename(code.co_filename) if code.co_filename else None,
                    line_number=lineno if lineno is not None else NO_LINE_NUMBER,
                )
            )
        frames.reverse()

        text = str(exc)
        return cls(type_name=type_name, message=text or None, frames=tuple(frames))


@dataclass(slots=True, frozen=True)
class LogEntry:
    """Immutable log entry received from the host logging pipeline.

    Attributes
    ----------
    timestamp:
        Milliseconds since the epoch.
    level:
        :class:`LogLevel` of the entry.
    rendered_text:
        Fully rendered log text.
    process_id:
        Identifier of the emitting process, if known.
    thread:
        Emitting thread, if known.
    class_name, method_name, file_name:
        Call-site metadata, if known.
    line_number:
        Call-site line or :data:`NO_LINE_NUMBER`.
    error:
        Captured error attached to the entry.
    message:
        Unrendered message template.
    logger_name:
        Name of the emitting logger.
    """

    timestamp: int
    level: LogLevel
    rendered_text: str
    process_id: str | None = None
    thread: ThreadInfo | None = None
    class_name: str | None = None
    method_name: str | None = None
    file_name: str | None = None
    line_number: int = NO_LINE_NUMBER
    error: CapturedError | None = None
    message: str | None = None
    logger_name: str | None = None


__all__ = [
    "BASIC_LOG_ENTRY_VALUES",
    "CapturedError",
    "LogEntry",
    "LogEntryValue",
    "NO_LINE_NUMBER",
    "StackFrame",
    "ThreadInfo",
]
