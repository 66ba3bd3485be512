"""Concrete adapters: delivery queue, transports, and exit hooks.

The stdlib logging bridge lives in :mod:`lib_log_gelf.adapters.stdlib_handler`
and is imported from there directly because it depends on the writer.
"""

from __future__ import annotations

from .exit_hooks import EXIT_HOOKS, ExitHookRegistry
from .gelf_transport import GelfTcpTransport, GelfUdpTransport, TransportError, create_transport
from .queue import DeliveryQueue

__all__ = [
    "DeliveryQueue",
    "EXIT_HOOKS",
    "ExitHookRegistry",
    "GelfTcpTransport",
    "GelfUdpTransport",
    "TransportError",
    "create_transport",
]
