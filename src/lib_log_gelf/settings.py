"""Writer configuration resolved once at construction.

Purpose
-------
Capture every writer setting in one immutable object with the defaults in a
single place, and translate textual configuration (property files, CLI or
environment strings) into it.

Contents
--------
* :class:`WriterConfig` - canonical configuration with defaults.
* :func:`resolve_hostname` - local hostname lookup with ``localhost`` fallback.
* :func:`parse_static_fields` / :func:`parse_log_entry_values` - text parsers.

System Role
-----------
Consumed by :class:`~lib_log_gelf.writer.GelfWriter`; built directly by code
or through :meth:`WriterConfig.from_properties` and
:func:`lib_log_gelf.config.load_writer_config`.
"""

from __future__ import annotations

import socket
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from lib_log_gelf.application.ports.transport import TransportConfig
from lib_log_gelf.domain.entries import BASIC_LOG_ENTRY_VALUES, LogEntryValue
from lib_log_gelf.domain.errors import ConfigurationError
from lib_log_gelf.domain.transports import TransportProtocol

DEFAULT_PORT = 12201
FALLBACK_HOSTNAME = "localhost"
FIELD_SEPARATOR = ":"
RESERVED_FIELD_NAMES = frozenset({"id", "_id"})

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def resolve_hostname(override: str | None, *, lookup: Callable[[], str] | None = None) -> str:
    """Return ``override`` or the local machine's hostname.

    Examples
    --------
    >>> resolve_hostname("api01")
    'api01'
    >>> def broken() -> str:
    ...     raise OSError("no network")
    >>> resolve_hostname("", lookup=broken)
    'localhost'
    """
    if override:
        return override
    try:
        hostname = (lookup or socket.gethostname)()
    except OSError:
        return FALLBACK_HOSTNAME
    return hostname or FALLBACK_HOSTNAME


def parse_static_fields(entries: Iterable[str]) -> dict[str, str]:
    """Split ``name:value`` strings on the first separator.

    Examples
    --------
    >>> parse_static_fields(["a:1", "b:2:3"])
    {'a': '1', 'b': '2:3'}
    """
    result: dict[str, str] = {}
    for entry in entries:
        key, separator, value = entry.partition(FIELD_SEPARATOR)
        key = key.strip()
        if not separator or not key:
            raise ConfigurationError(f"Static field must be formatted as 'name:value', got {entry!r}")
        _check_field_name(key)
        result[key] = value
    return result


def _check_field_name(name: str) -> None:
    # Graylog drops an additional field named _id
    if name in RESERVED_FIELD_NAMES:
        raise ConfigurationError(f"Static field name {name!r} is reserved by GELF")


def parse_log_entry_values(names: Iterable[str | LogEntryValue]) -> frozenset[LogEntryValue]:
    """Convert names (or enum members) into a set of :class:`LogEntryValue`."""
    return frozenset(name if isinstance(name, LogEntryValue) else LogEntryValue.from_name(name) for name in names)


def _split_list(value: str | Iterable[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(slots=True, frozen=True)
class WriterConfig:
    """Immutable GELF writer configuration.

    Attributes
    ----------
    server:
        Hostname of the GELF server. ``None`` is rejected.
    port:
        Port of the GELF server.
    transport:
        :class:`TransportProtocol` or its name (``"udp"``/``"tcp"``).
    hostname:
        Application host recorded on messages; resolved to the machine's
        hostname when empty.
    additional_log_entry_values:
        Entry values required on top of the basic ones.
    static_fields:
        Fields attached to every message. A mapping is copied; a sequence of
        ``name:value`` strings is parsed.
    queue_size:
        Capacity of the transport's outbound queue.
    connect_timeout:
        TCP connect timeout in milliseconds.
    reconnect_delay:
        Delay between reconnect attempts in milliseconds.
    send_buffer_size:
        Socket send buffer in bytes; ``-1`` keeps the platform default.
    tcp_no_delay:
        Disable Nagle's algorithm for TCP.

    Examples
    --------
    >>> config = WriterConfig(server="gray.example", hostname="api01", static_fields=["env:prod"])
    >>> config.port, config.transport.value, dict(config.static_fields)
    (12201, 'udp', {'env': 'prod'})
    """

    server: str = "localhost"
    port: int = DEFAULT_PORT
    transport: TransportProtocol = TransportProtocol.UDP
    hostname: str | None = None
    additional_log_entry_values: frozenset[LogEntryValue] = frozenset()
    static_fields: Mapping[str, Any] = field(default_factory=dict)
    queue_size: int = 512
    connect_timeout: int = 1000
    reconnect_delay: int = 500
    send_buffer_size: int = -1
    tcp_no_delay: bool = False

    def __post_init__(self) -> None:
        if self.server is None:
            raise ConfigurationError("server must not be None")
        transport = self.transport
        if not isinstance(transport, TransportProtocol):
            transport = TransportProtocol.from_name(str(transport))
        object.__setattr__(self, "transport", transport)
        object.__setattr__(self, "hostname", resolve_hostname(self.hostname))
        additional = self.additional_log_entry_values or ()
        if isinstance(additional, str):
            additional = _split_list(additional)
        object.__setattr__(self, "additional_log_entry_values", parse_log_entry_values(additional))

        static_fields = self.static_fields
        if static_fields is None:
            static_fields = {}
        elif isinstance(static_fields, str):
            static_fields = parse_static_fields(_split_list(static_fields))
        elif not isinstance(static_fields, Mapping):
            static_fields = parse_static_fields(static_fields)
        else:
            for key in static_fields:
                _check_field_name(str(key))
        object.__setattr__(self, "static_fields", MappingProxyType(dict(static_fields)))

    @property
    def required_log_entry_values(self) -> frozenset[LogEntryValue]:
        """Basic entry values united with the configured additional ones."""

        return BASIC_LOG_ENTRY_VALUES | self.additional_log_entry_values

    def transport_config(self) -> TransportConfig:
        """Return the connection parameters for the transport factory."""

        return TransportConfig(
            host=self.server,
            port=self.port,
            protocol=self.transport,
            queue_size=self.queue_size,
            connect_timeout=self.connect_timeout,
            reconnect_delay=self.reconnect_delay,
            send_buffer_size=self.send_buffer_size,
            tcp_no_delay=self.tcp_no_delay,
        )

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "WriterConfig":
        """Build a configuration from textual properties.

        Recognised keys are ``server``, ``port``, ``transport``, ``hostname``,
        ``additionalLogEntryValues``, ``staticFields``, ``queueSize``,
        ``connectTimeout``, ``reconnectDelay``, ``sendBufferSize`` and
        ``tcpNoDelay``. List values accept comma-separated strings. Missing
        keys keep the defaults.

        Raises
        ------
        ConfigurationError
            When a value cannot be parsed.

        Examples
        --------
        >>> config = WriterConfig.from_properties(
        ...     {"server": "gray.example", "transport": "TCP", "hostname": "api01", "staticFields": "a:1, b:2:3"}
        ... )
        >>> config.transport is TransportProtocol.TCP, dict(config.static_fields)
        (True, {'a': '1', 'b': '2:3'})
        """
        kwargs: dict[str, Any] = {}
        if "server" in properties:
            kwargs["server"] = properties["server"]
        if "port" in properties:
            kwargs["port"] = _parse_int("port", properties["port"])
        if "transport" in properties:
            kwargs["transport"] = TransportProtocol.from_name(str(properties["transport"]))
        if "hostname" in properties:
            kwargs["hostname"] = properties["hostname"]
        if "additionalLogEntryValues" in properties:
            kwargs["additional_log_entry_values"] = parse_log_entry_values(_split_list(properties["additionalLogEntryValues"]))
        if "staticFields" in properties:
            raw = properties["staticFields"]
            kwargs["static_fields"] = dict(raw) if isinstance(raw, Mapping) else parse_static_fields(_split_list(raw))
        for key, attribute in _INT_PROPERTIES.items():
            if key in properties:
                kwargs[attribute] = _parse_int(key, properties[key])
        if "tcpNoDelay" in properties:
            kwargs["tcp_no_delay"] = _parse_bool("tcpNoDelay", properties["tcpNoDelay"])
        return cls(**kwargs)


_INT_PROPERTIES = {
    "queueSize": "queue_size",
    "connectTimeout": "connect_timeout",
    "reconnectDelay": "reconnect_delay",
    "sendBufferSize": "send_buffer_size",
}


__all__ = [
    "DEFAULT_PORT",
    "FALLBACK_HOSTNAME",
    "RESERVED_FIELD_NAMES",
    "WriterConfig",
    "parse_log_entry_values",
    "parse_static_fields",
    "resolve_hostname",
]
