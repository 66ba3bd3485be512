"""Transport protocol selection for GELF delivery."""

from __future__ import annotations

from enum import Enum

from .errors import ConfigurationError


class TransportProtocol(Enum):
    """Wire transports supported by GELF servers."""

    UDP = "udp"
    TCP = "tcp"

    @classmethod
    def from_name(cls, name: str) -> "TransportProtocol":
        """Parse ``name`` case-insensitively.

        Examples
        --------
        >>> TransportProtocol.from_name("TCP") is TransportProtocol.TCP
        True
        >>> TransportProtocol.from_name("smtp")
        Traceback (most recent call last):
        ...
        lib_log_gelf.domain.errors.ConfigurationError: Unknown GELF transport: 'smtp'
        """
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise ConfigurationError(f"Unknown GELF transport: {name!r}") from exc


__all__ = ["TransportProtocol"]
