"""Domain entities and value objects used by the GELF writer."""

from __future__ import annotations

from .entries import (
    BASIC_LOG_ENTRY_VALUES,
    NO_LINE_NUMBER,
    CapturedError,
    LogEntry,
    LogEntryValue,
    StackFrame,
    ThreadInfo,
)
from .errors import ConfigurationError, UnknownLevelError, WriterInitError
from .levels import GelfLevel, LogLevel
from .messages import GelfMessage
from .transports import TransportProtocol

__all__ = [
    "BASIC_LOG_ENTRY_VALUES",
    "CapturedError",
    "ConfigurationError",
    "GelfLevel",
    "GelfMessage",
    "LogEntry",
    "LogEntryValue",
    "LogLevel",
    "NO_LINE_NUMBER",
    "StackFrame",
    "ThreadInfo",
    "TransportProtocol",
    "UnknownLevelError",
    "WriterInitError",
]
