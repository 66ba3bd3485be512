"""Port describing the transport client that delivers GELF messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from lib_log_gelf.domain.messages import GelfMessage
from lib_log_gelf.domain.transports import TransportProtocol


@dataclass(slots=True, frozen=True)
class TransportConfig:
    """Connection parameters handed to a transport factory.

    Attributes
    ----------
    host, port:
        Remote GELF server address.
    protocol:
        Datagram (UDP) or stream (TCP) delivery.
    queue_size:
        Capacity of the outbound message queue.
    connect_timeout:
        TCP connect timeout in milliseconds.
    reconnect_delay:
        Pause before reconnecting after a failed TCP send, in milliseconds.
    send_buffer_size:
        Socket ``SO_SNDBUF`` in bytes; ``-1`` keeps the platform default.
    tcp_no_delay:
        Disable Nagle's algorithm on TCP connections.
    """

    host: str
    port: int
    protocol: TransportProtocol = TransportProtocol.UDP
    queue_size: int = 512
    connect_timeout: int = 1000
    reconnect_delay: int = 500
    send_buffer_size: int = -1
    tcp_no_delay: bool = False

    @property
    def remote_address(self) -> tuple[str, int]:
        return (self.host, self.port)


@runtime_checkable
class GelfTransportPort(Protocol):
    """Running client accepting GELF messages for asynchronous delivery."""

    def send(self, message: GelfMessage) -> None:
        """Accept ``message`` for delivery; raise when it cannot be accepted."""

    def stop(self) -> None:
        """Stop delivery and release network resources."""


@runtime_checkable
class TransportFactory(Protocol):
    """Build and start a transport client from ``config``."""

    def __call__(self, config: TransportConfig) -> GelfTransportPort: ...


__all__ = ["GelfTransportPort", "TransportConfig", "TransportFactory"]
