"""Port describing the process-exit hook registry."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Closable(Protocol):
    """Resource closed when the process exits."""

    def close(self) -> None: ...


@runtime_checkable
class ExitHookPort(Protocol):
    """Registry closing registered resources at process exit."""

    def register(self, closable: Closable) -> None:
        """Close ``closable`` at process exit unless unregistered first."""

    def unregister(self, closable: Closable) -> None:
        """Forget ``closable``; unknown resources are ignored."""


__all__ = ["Closable", "ExitHookPort"]
