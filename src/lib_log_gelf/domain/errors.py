"""Exception types raised by the GELF writer."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when writer configuration input cannot be parsed or is incomplete."""


class UnknownLevelError(RuntimeError):
    """Raised when a level has no GELF mapping.

    This signals that :class:`~lib_log_gelf.domain.levels.LogLevel` and the
    level mapping table have drifted apart; it is never a data error.
    """


class WriterInitError(RuntimeError):
    """Raised when the writer cannot obtain a running transport client."""


__all__ = ["ConfigurationError", "UnknownLevelError", "WriterInitError"]
