"""Process-exit hook registry backed by :mod:`atexit`.

Writers register themselves after initialisation so a normal interpreter
shutdown closes their transport even if the host never calls ``close``.
"""

from __future__ import annotations

import atexit
import logging
from threading import RLock

from lib_log_gelf.application.ports.exit_hooks import Closable, ExitHookPort

LOGGER = logging.getLogger(__name__)


class ExitHookRegistry(ExitHookPort):
    """Close registered resources once, at interpreter exit or on :meth:`run`."""

    def __init__(self, *, install: bool = True) -> None:
        """Create an empty registry.

        Parameters
        ----------
        install:
            When ``True`` the first :meth:`register` call installs
            :meth:`run` as an :mod:`atexit` handler.
        """
        self._closables: list[Closable] = []
        self._lock = RLock()
        self._install = install
        self._installed = False

    def register(self, closable: Closable) -> None:
        with self._lock:
            if any(existing is closable for existing in self._closables):
                return
            self._closables.append(closable)
            if self._install and not self._installed:
                atexit.register(self.run)
                self._installed = True

    def unregister(self, closable: Closable) -> None:
        with self._lock:
            self._closables = [existing for existing in self._closables if existing is not closable]

    def __contains__(self, closable: object) -> bool:
        with self._lock:
            return any(existing is closable for existing in self._closables)

    def __len__(self) -> int:
        with self._lock:
            return len(self._closables)

    def run(self) -> None:
        """Close every registered resource, newest first, logging failures."""
        with self._lock:
            pending = list(reversed(self._closables))
            self._closables.clear()
        for closable in pending:
            try:
                closable.close()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Exit hook failed to close %r", closable, exc_info=exc)


EXIT_HOOKS = ExitHookRegistry()
"""Process-wide registry used by writers unless another one is injected."""


__all__ = ["EXIT_HOOKS", "ExitHookRegistry"]
