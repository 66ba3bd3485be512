"""Default GELF transport clients over TCP and UDP.

Purpose
-------
Deliver :class:`GelfMessage` payloads to a Graylog-compatible server so the
writer works without an externally supplied client.

Contents
--------
* :class:`TransportError` - raised when a message cannot be accepted.
* :class:`GelfTcpTransport` - null-byte framed JSON over a persistent stream.
* :class:`GelfUdpTransport` - JSON datagrams, chunked above the datagram limit.
* :func:`create_transport` - :class:`TransportFactory` used by the writer.

System Role
-----------
Implements :class:`~lib_log_gelf.application.ports.transport.GelfTransportPort`.
Messages are queued by :class:`~lib_log_gelf.adapters.queue.DeliveryQueue`
and written from its worker thread, so only that thread touches sockets
until :meth:`stop` has joined it.
"""

from __future__ import annotations

import logging
import math
import os
import socket
import struct
import time
from typing import Any, Callable

from lib_log_gelf.adapters.queue import DeliveryQueue
from lib_log_gelf.application.ports.transport import GelfTransportPort, TransportConfig
from lib_log_gelf.domain.messages import GelfMessage
from lib_log_gelf.domain.transports import TransportProtocol

LOGGER = logging.getLogger(__name__)

Diagnostic = Callable[[str, dict[str, Any]], None]

CHUNK_MAGIC = b"\x1e\x0f"
MAX_DATAGRAM_SIZE = 8192
MAX_CHUNKS = 128
_CHUNK_HEADER_SIZE = len(CHUNK_MAGIC) + 8 + 2


class TransportError(RuntimeError):
    """Raised when a transport cannot accept a message."""


class _QueuedTransport(GelfTransportPort):
    """Shared queueing and lifecycle logic for the socket transports."""

    def __init__(self, config: TransportConfig, *, diagnostic: Diagnostic | None = None) -> None:
        self._config = config
        self._queue = DeliveryQueue(worker=self._deliver, maxsize=config.queue_size, diagnostic=diagnostic)
        self._socket: Any = None
        self._stopped = False

    @property
    def config(self) -> TransportConfig:
        return self._config

    def start(self) -> "_QueuedTransport":
        """Start the delivery worker and return ``self`` for chaining."""
        self._queue.start()
        return self

    def send(self, message: GelfMessage) -> None:
        """Queue ``message`` for delivery.

        Raises
        ------
        TransportError
            When the transport was stopped or the queue stayed full.
        """
        if self._stopped:
            raise TransportError("GELF transport has been stopped")
        if not self._queue.put(message):
            raise TransportError(f"GELF delivery queue is full (capacity {self._config.queue_size}); message rejected")

    def stop(self) -> None:
        """Drain queued messages and close the socket. Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True
        self._queue.stop()
        self._close_socket()
        LOGGER.debug("GELF %s transport to %s:%s stopped", self._config.protocol.value, self._config.host, self._config.port)

    def _deliver(self, message: GelfMessage) -> None:
        raise NotImplementedError

    def _apply_send_buffer(self, sock: Any) -> None:
        if self._config.send_buffer_size > 0:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, self._config.send_buffer_size)

    def _close_socket(self) -> None:
        sock, self._socket = self._socket, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError:  # pragma: no cover - close failures are not actionable
            LOGGER.debug("Ignoring error while closing GELF socket", exc_info=True)


class GelfTcpTransport(_QueuedTransport):
    """Send null-terminated GELF JSON frames over a persistent TCP connection."""

    def _deliver(self, message: GelfMessage) -> None:
        frame = message.to_json().encode("utf-8") + b"\x00"
        try:
            self._connection().sendall(frame)
        except OSError as exc:
            LOGGER.warning("GELF TCP send failed (%s); reconnecting", exc)
            self._close_socket()
            time.sleep(self._config.reconnect_delay / 1000)
            self._connection().sendall(frame)

    def _connection(self) -> Any:
        if self._socket is None:
            sock = socket.create_connection(self._config.remote_address, timeout=self._config.connect_timeout / 1000)
            if self._config.tcp_no_delay:
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            self._apply_send_buffer(sock)
            self._socket = sock
            LOGGER.debug("Connected to GELF server %s:%s", self._config.host, self._config.port)
        return self._socket


class GelfUdpTransport(_QueuedTransport):
    """Send GELF JSON datagrams, chunking payloads above the datagram limit."""

    def __init__(
        self,
        config: TransportConfig,
        *,
        family: int = socket.AF_INET,
        diagnostic: Diagnostic | None = None,
    ) -> None:
        super().__init__(config, diagnostic=diagnostic)
        self._family = family

    def _deliver(self, message: GelfMessage) -> None:
        payload = message.to_json().encode("utf-8")
        sock = self._datagram_socket()
        for datagram in chunk_payload(payload):
            sock.sendto(datagram, self._config.remote_address)

    def _datagram_socket(self) -> Any:
        if self._socket is None:
            sock = socket.socket(self._family, socket.SOCK_DGRAM)
            self._apply_send_buffer(sock)
            self._socket = sock
        return self._socket


def chunk_payload(payload: bytes, *, max_size: int = MAX_DATAGRAM_SIZE) -> list[bytes]:
    """Split ``payload`` into GELF chunks when it exceeds ``max_size``.

    Examples
    --------
    >>> chunk_payload(b"small")
    [b'small']
    >>> chunks = chunk_payload(b"x" * 30, max_size=22)
    >>> len(chunks), chunks[0][:2] == CHUNK_MAGIC, chunks[1][10:12]
    (3, True, b'\\x01\\x03')
    """
    if len(payload) <= max_size:
        return [payload]

    body_size = max_size - _CHUNK_HEADER_SIZE
    count = math.ceil(len(payload) / body_size)
    if count > MAX_CHUNKS:
        raise TransportError(f"GELF payload of {len(payload)} bytes exceeds {MAX_CHUNKS} chunks")

    message_id = os.urandom(8)
    chunks = []
    for index in range(count):
        body = payload[index * body_size : (index + 1) * body_size]
        chunks.append(CHUNK_MAGIC + message_id + struct.pack("BB", index, count) + body)
    return chunks


def create_transport(config: TransportConfig, *, diagnostic: Diagnostic | None = None) -> GelfTransportPort:
    """Build and start the transport matching ``config.protocol``.

    Raises
    ------
    ValueError
        When the port is outside ``1..65535``.
    OSError
        When the server address cannot be resolved.
    """
    if not 0 < config.port < 65536:
        raise ValueError(f"GELF port must be between 1 and 65535, got {config.port}")

    socktype = socket.SOCK_STREAM if config.protocol is TransportProtocol.TCP else socket.SOCK_DGRAM
    addresses = socket.getaddrinfo(config.host, config.port, type=socktype)

    transport: _QueuedTransport
    if config.protocol is TransportProtocol.TCP:
        transport = GelfTcpTransport(config, diagnostic=diagnostic)
    else:
        transport = GelfUdpTransport(config, family=addresses[0][0], diagnostic=diagnostic)
    LOGGER.debug("Starting GELF %s transport to %s:%s", config.protocol.value, config.host, config.port)
    return transport.start()


__all__ = [
    "GelfTcpTransport",
    "GelfUdpTransport",
    "TransportError",
    "chunk_payload",
    "create_transport",
]
