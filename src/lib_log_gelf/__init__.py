"""Public package surface of the GELF writer.

Build a :class:`WriterConfig`, hand it to :class:`GelfWriter`, then either
call ``init``/``write``/``close`` directly with :class:`LogEntry` objects or
attach a :class:`GelfHandler` to a stdlib logger.
"""

from __future__ import annotations

from .adapters.stdlib_handler import GelfHandler, entry_from_record
from .config import load_writer_config
from .domain import (
    CapturedError,
    ConfigurationError,
    GelfLevel,
    GelfMessage,
    LogEntry,
    LogEntryValue,
    LogLevel,
    StackFrame,
    ThreadInfo,
    TransportProtocol,
    UnknownLevelError,
    WriterInitError,
)
from .settings import WriterConfig
from .writer import GelfWriter

__all__ = [
    "CapturedError",
    "ConfigurationError",
    "GelfHandler",
    "GelfLevel",
    "GelfMessage",
    "GelfWriter",
    "LogEntry",
    "LogEntryValue",
    "LogLevel",
    "StackFrame",
    "ThreadInfo",
    "TransportProtocol",
    "UnknownLevelError",
    "WriterConfig",
    "WriterInitError",
    "entry_from_record",
    "load_writer_config",
]
