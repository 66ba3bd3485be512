"""Thread-based delivery queue for outgoing GELF messages.

Purpose
-------
Decouple logging callers from network IO: producers enqueue messages, a
daemon worker drains them into the socket layer.

Contents
--------
* :class:`DeliveryQueue` - bounded queue with a single background worker.

System Role
-----------
Backs the default transport clients in :mod:`lib_log_gelf.adapters.gelf_transport`;
the ``queue_size`` writer setting becomes its capacity.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from typing import Any

from lib_log_gelf.domain.messages import GelfMessage

LOGGER = logging.getLogger(__name__)


class DeliveryQueue:
    """Process messages on a background thread.

    Examples
    --------
    >>> from lib_log_gelf.domain import GelfLevel
    >>> delivered = []
    >>> q = DeliveryQueue(worker=delivered.append)
    >>> q.start()
    >>> q.put(GelfMessage("msg", "host", GelfLevel.INFO, 0.0))
    True
    >>> q.stop()
    >>> delivered[0].short_message
    'msg'
    """

    def __init__(
        self,
        *,
        worker: Callable[[GelfMessage], None],
        maxsize: int = 512,
        timeout: float | None = 1.0,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Create the queue.

        Parameters
        ----------
        worker:
            Callable invoked for each message on the worker thread.
        maxsize:
            Maximum number of queued messages; ``0`` or less means unbounded.
        timeout:
            Seconds a producer waits for free capacity before :meth:`put`
            gives up. ``None`` blocks indefinitely.
        stop_timeout:
            Drain deadline applied by :meth:`stop`. ``None`` waits forever.
        diagnostic:
            Optional hook receiving ``(event_name, payload)`` for worker
            failures.
        """
        self._worker = worker
        self._queue: queue.Queue[GelfMessage | None] = queue.Queue(maxsize=max(maxsize, 0))
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._timeout = timeout
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._worker_failed = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def worker_failed(self) -> bool:
        """Return ``True`` once the worker raised while delivering a message."""

        return self._worker_failed

    def start(self) -> None:
        """Start the worker thread if it is not already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._worker_failed = False
        self._thread = threading.Thread(target=self._run, name="lib_log_gelf-delivery", daemon=True)
        self._thread.start()

    def put(self, message: GelfMessage) -> bool:
        """Enqueue ``message``.

        Returns ``False`` when the queue stayed full for the configured
        timeout or the worker has been stopped.
        """
        if self._stop_event.is_set():
            return False
        try:
            self._queue.put(message, timeout=self._timeout)
        except queue.Full:
            return False
        return True

    def stop(self, *, timeout: float | None = None) -> None:
        """Drain pending messages and stop the worker.

        Messages still queued when the deadline passes are discarded.
        """
        thread = self._thread
        if thread is None:
            return

        effective_timeout = timeout if timeout is not None else self._stop_timeout
        deadline = time.monotonic() + effective_timeout if effective_timeout is not None else None
        self._stop_event.set()
        self._enqueue_stop_signal(deadline)

        if deadline is None:
            thread.join()
        else:
            thread.join(max(0.0, deadline - time.monotonic()))

        if thread.is_alive():
            dropped = self._discard_pending()
            LOGGER.warning("GELF delivery worker did not stop in time; %d message(s) discarded", dropped)
            self._emit_diagnostic("queue_shutdown_timeout", {"timeout": effective_timeout, "dropped": dropped})
        self._thread = None

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    break
                try:
                    self._worker(item)
                except Exception as exc:  # noqa: BLE001
                    self._worker_failed = True
                    self._report_worker_exception(item, exc)
            finally:
                self._queue.task_done()

    def _report_worker_exception(self, message: GelfMessage, exc: Exception) -> None:
        """Log delivery failures without tearing down the thread."""

        LOGGER.error("GELF delivery failed; message dropped", exc_info=exc)
        self._emit_diagnostic(
            "delivery_error",
            {"short_message": message.short_message, "exception": repr(exc)},
        )

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Delivery diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)

    def _enqueue_stop_signal(self, deadline: float | None) -> None:
        """Wake the worker so it observes the stop request."""

        while True:
            try:
                if deadline is None:
                    self._queue.put(None)
                else:
                    self._queue.put(None, timeout=max(0.0, deadline - time.monotonic()))
                return
            except queue.Full:
                # make room by discarding the oldest pending message
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    continue
                self._queue.task_done()
                LOGGER.warning("GELF delivery queue full during shutdown; oldest message discarded")

    def _discard_pending(self) -> int:
        dropped = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return dropped
            self._queue.task_done()
            if item is not None:
                dropped += 1


__all__ = ["DeliveryQueue"]
