"""GELF writer converting log entries into messages for a transport client.

Purpose
-------
Own the transport client's lifecycle and turn every :class:`LogEntry` handed
over by the host logging pipeline into a :class:`GelfMessage`.

Contents
--------
* :class:`GelfWriter` - ``init`` / ``write`` / ``flush`` / ``close`` lifecycle.

System Role
-----------
Outer shell of the package: wires :class:`~lib_log_gelf.settings.WriterConfig`
to a transport factory and an exit-hook registry, delegating the conversion
itself to :func:`~lib_log_gelf.application.use_cases.build_message.build_gelf_message`.

Threading
---------
``write`` reads only immutable configuration, so concurrent callers need no
locking. ``init`` and ``close`` are expected once each from a single
controlling thread and must not race with in-flight ``write`` calls; the
writer does not guard against that race.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Mapping

from lib_log_gelf.adapters.exit_hooks import EXIT_HOOKS
from lib_log_gelf.adapters.gelf_transport import create_transport
from lib_log_gelf.application.ports.exit_hooks import ExitHookPort
from lib_log_gelf.application.ports.transport import GelfTransportPort, TransportFactory
from lib_log_gelf.application.use_cases.build_message import build_gelf_message
from lib_log_gelf.domain.entries import LogEntry, LogEntryValue
from lib_log_gelf.domain.errors import WriterInitError
from lib_log_gelf.settings import WriterConfig

LOGGER = logging.getLogger(__name__)


class GelfWriter:
    """Write log entries to a GELF server.

    Examples
    --------
    >>> from lib_log_gelf.domain import LogEntry, LogLevel
    >>> sent = []
    >>> class _Client:
    ...     def send(self, message): sent.append(message)
    ...     def stop(self): pass
    >>> writer = GelfWriter(WriterConfig(hostname="api01"), transport_factory=lambda config: _Client())
    >>> writer.init()
    >>> writer.write(LogEntry(1_700_000_000_000, LogLevel.INFO, "ready"))
    >>> sent[0].short_message, sent[0].timestamp
    ('ready', 1700000000.0)
    >>> writer.close()
    """

    def __init__(
        self,
        config: WriterConfig | None = None,
        *,
        transport_factory: TransportFactory | None = None,
        exit_hooks: ExitHookPort | None = None,
    ) -> None:
        """Create an uninitialised writer.

        Parameters
        ----------
        config:
            Writer configuration; defaults to ``WriterConfig()`` which targets
            ``localhost:12201`` over UDP.
        transport_factory:
            Builds the running transport client during :meth:`init`.
            Defaults to :func:`~lib_log_gelf.adapters.gelf_transport.create_transport`.
        exit_hooks:
            Registry closing the writer at process exit. Defaults to the
            process-wide :data:`~lib_log_gelf.adapters.exit_hooks.EXIT_HOOKS`.
        """
        self._config = config if config is not None else WriterConfig()
        self._transport_factory: TransportFactory = transport_factory or create_transport
        self._exit_hooks: ExitHookPort = exit_hooks if exit_hooks is not None else EXIT_HOOKS
        self._client: GelfTransportPort | None = None
        self._closed = False

    @property
    def config(self) -> WriterConfig:
        return self._config

    @property
    def hostname(self) -> str:
        """Application hostname resolved at construction."""

        return self._config.hostname or ""

    @property
    def static_fields(self) -> Mapping[str, Any]:
        return self._config.static_fields

    @property
    def required_log_entry_values(self) -> frozenset[LogEntryValue]:
        """Entry values the host must populate for this writer."""

        return self._config.required_log_entry_values

    @property
    def initialised(self) -> bool:
        return self._client is not None

    def init(self) -> None:
        """Create the transport client and register the process-exit hook.

        Raises
        ------
        WriterInitError
            When the transport factory fails; the writer stays uninitialised.
        RuntimeError
            When called twice or after :meth:`close`.
        """
        if self._closed:
            raise RuntimeError("GelfWriter cannot be re-initialised after close()")
        if self._client is not None:
            raise RuntimeError("GelfWriter.init() was already called")

        transport_config = self._config.transport_config()
        try:
            client = self._transport_factory(transport_config)
        except Exception as exc:
            raise WriterInitError(
                f"Failed to create GELF {transport_config.protocol.value} transport to {transport_config.host}:{transport_config.port}"
            ) from exc

        self._client = client
        self._exit_hooks.register(self)
        LOGGER.debug("GELF writer initialised for %s:%s", transport_config.host, transport_config.port)

    def write(self, entry: LogEntry) -> None:
        """Convert ``entry`` and hand the message to the transport client.

        Send failures propagate; the writer neither retries nor buffers.

        Raises
        ------
        RuntimeError
            When :meth:`init` has not been called.
        UnknownLevelError
            When the entry level has no GELF mapping.
        """
        client = self._client
        if client is None:
            raise RuntimeError("GelfWriter.init() must be called before write()")
        self.write_to(client, entry)

    def write_to(self, client: GelfTransportPort, entry: LogEntry) -> None:
        """Convert ``entry`` and send it through ``client``."""
        message = build_gelf_message(entry, hostname=self.hostname, static_fields=self._config.static_fields)
        client.send(message)

    def flush(self) -> None:
        """Do nothing.

        Known limitation: delivery is asynchronous and buffered inside the
        transport client; this writer offers no synchronous flush guarantee.
        Messages are drained only when :meth:`close` stops the client.
        """

    def close(self) -> None:
        """Unregister the exit hook and stop the transport client.

        Calling ``close`` more than once is harmless; the client is stopped
        only the first time.
        """
        self._exit_hooks.unregister(self)
        self._closed = True
        client, self._client = self._client, None
        if client is not None:
            client.stop()
            LOGGER.debug("GELF writer closed")

    def __enter__(self) -> "GelfWriter":
        self.init()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["GelfWriter"]
