"""Log level abstractions for entries and outgoing GELF messages.

Purpose
-------
Offer a domain-specific representation of the five writer severities and of
the syslog severities GELF messages carry on the wire.

Contents
--------
* :class:`LogLevel` - ordered severities of incoming log entries.
* :class:`GelfLevel` - syslog severities used by GELF payloads.

System Role
-----------
Used by the conversion use case to coarsen entry levels into GELF levels and
by the stdlib bridge to translate :mod:`logging` numeric levels.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from functools import total_ordering

from .errors import ConfigurationError


@total_ordering
class LogLevel(Enum):
    """Ordered severities of log entries (TRACE < DEBUG < INFO < WARNING < ERROR)."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value < other.value

    @property
    def severity(self) -> str:
        """Return the lowercase severity name for structured payloads."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the :mod:`logging` numeric level matching this level.

        ``TRACE`` has no stdlib constant and maps to ``5``.
        """

        return self.value if self is LogLevel.TRACE else getattr(logging, self.name)

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`.

        Levels between the named constants round down to the nearest lower
        severity; ``CRITICAL`` collapses onto ``ERROR``.

        Examples
        --------
        >>> LogLevel.from_python_level(logging.CRITICAL) is LogLevel.ERROR
        True
        >>> LogLevel.from_python_level(1) is LogLevel.TRACE
        True
        """
        if level < logging.DEBUG:
            return cls.TRACE
        if level < logging.INFO:
            return cls.DEBUG
        if level < logging.WARNING:
            return cls.INFO
        if level < logging.ERROR:
            return cls.WARNING
        return cls.ERROR


class GelfLevel(IntEnum):
    """Syslog severities carried in the GELF ``level`` field."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


__all__ = ["GelfLevel", "LogLevel"]
