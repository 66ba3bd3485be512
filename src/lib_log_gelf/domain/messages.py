"""GELF event message built for every log entry.

Purpose
-------
Provide an immutable representation of the severity-leveled event handed to
the transport client.

Contents
--------
* :class:`GelfMessage` dataclass with GELF 1.1 serialisation helpers.

System Role
-----------
The writer treats messages as opaque payloads; only transport implementations
call :meth:`GelfMessage.to_dict` / :meth:`GelfMessage.to_json`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .levels import GelfLevel

GELF_VERSION = "1.1"


@dataclass(slots=True, frozen=True)
class GelfMessage:
    """Immutable GELF event.

    Attributes
    ----------
    short_message:
        Rendered log text.
    host:
        Name of the originating application host.
    level:
        :class:`GelfLevel` severity.
    timestamp:
        Seconds since the epoch with sub-second precision.
    full_message:
        Rendered text followed by the stack trace; only set for entries
        carrying an error.
    additional_fields:
        Copy of static and per-entry fields (names without the ``_`` prefix).
    """

    short_message: str
    host: str
    level: GelfLevel
    timestamp: float
    full_message: str | None = None
    additional_fields: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "additional_fields", dict(self.additional_fields))

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a GELF 1.1 payload dictionary.

        Examples
        --------
        >>> msg = GelfMessage("hi", "api01", GelfLevel.INFO, 1.5, additional_fields={"env": "prod"})
        >>> msg.to_dict()["_env"], msg.to_dict()["level"]
        ('prod', 6)
        """

        payload: dict[str, Any] = {
            "version": GELF_VERSION,
            "host": self.host,
            "short_message": self.short_message,
            "timestamp": self.timestamp,
            "level": int(self.level),
        }
        if self.full_message is not None:
            payload["full_message"] = self.full_message
        for key, value in self.additional_fields.items():
            name = key if key.startswith("_") else f"_{key}"
            payload[name] = value
        return payload

    def to_json(self) -> str:
        """Serialise to compact JSON; non-JSON values fall back to ``str``."""

        return json.dumps(self.to_dict(), separators=(",", ":"), default=str)


__all__ = ["GELF_VERSION", "GelfMessage"]
