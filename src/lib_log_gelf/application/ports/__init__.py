"""Ports implemented by adapters and consumed by the writer."""

from __future__ import annotations

from .exit_hooks import Closable, ExitHookPort
from .transport import GelfTransportPort, TransportConfig, TransportFactory

__all__ = ["Closable", "ExitHookPort", "GelfTransportPort", "TransportConfig", "TransportFactory"]
