"""Bridge from the standard :mod:`logging` module to :class:`GelfWriter`.

Purpose
-------
Let applications using stdlib logging ship records to Graylog by attaching a
handler instead of calling the writer directly.

Contents
--------
* :func:`entry_from_record` - build a :class:`LogEntry` from a ``LogRecord``.
* :class:`GelfHandler` - :class:`logging.Handler` owning a writer.

System Role
-----------
Plays the host-framework part: it honours the writer's required entry values
so unused attributes (threads, call sites, exceptions) are never captured.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from lib_log_gelf.domain.entries import NO_LINE_NUMBER, CapturedError, LogEntry, LogEntryValue, ThreadInfo
from lib_log_gelf.domain.levels import LogLevel
from lib_log_gelf.writer import GelfWriter

_OWN_LOGGER_PREFIX = "lib_log_gelf"


def entry_from_record(record: logging.LogRecord, required: Collection[LogEntryValue]) -> LogEntry:
    """Translate ``record`` into a :class:`LogEntry`.

    Only attributes listed in ``required`` are populated; everything else is
    left absent so the corresponding GELF fields are omitted.

    Examples
    --------
    >>> record = logging.LogRecord("app", logging.WARNING, "/srv/app.py", 7, "disk %s%%", (91,), None, func="check")
    >>> entry = entry_from_record(record, {LogEntryValue.LINE, LogEntryValue.METHOD})
    >>> entry.rendered_text, entry.level.name, entry.line_number, entry.method_name, entry.file_name
    ('disk 91%', 'WARNING', 7, 'check', None)
    """
    process_id: str | None = None
    if LogEntryValue.PROCESS_ID in required and record.process is not None:
        process_id = str(record.process)

    thread: ThreadInfo | None = None
    if LogEntryValue.THREAD in required and record.threadName:
        thread = ThreadInfo(name=record.threadName)

    error: CapturedError | None = None
    if LogEntryValue.EXCEPTION in required and record.exc_info and record.exc_info[1] is not None:
        error = CapturedError.from_exception(record.exc_info[1])

    line_number = NO_LINE_NUMBER
    if LogEntryValue.LINE in required and record.lineno:
        line_number = record.lineno

    return LogEntry(
        timestamp=int(record.created * 1000),
        level=LogLevel.from_python_level(record.levelno),
        rendered_text=record.getMessage(),
        process_id=process_id,
        thread=thread,
        class_name=record.module if LogEntryValue.CLASS in required else None,
        method_name=record.funcName if LogEntryValue.METHOD in required else None,
        file_name=record.filename if LogEntryValue.FILE in required else None,
        line_number=line_number,
        error=error,
        message=str(record.msg) if LogEntryValue.MESSAGE in required else None,
        logger_name=record.name if LogEntryValue.LOGGER in required else None,
    )


class GelfHandler(logging.Handler):
    """Forward stdlib log records to a :class:`GelfWriter`.

    The handler initialises the writer on construction (unless it already is)
    and closes it together with the handler. Records from ``lib_log_gelf``'s
    own loggers are skipped so transport diagnostics never loop back into the
    transport.

    Examples
    --------
    >>> sent = []
    >>> class _Client:
    ...     def send(self, message): sent.append(message)
    ...     def stop(self): pass
    >>> from lib_log_gelf.settings import WriterConfig
    >>> handler = GelfHandler(GelfWriter(WriterConfig(hostname="api01"), transport_factory=lambda config: _Client()))
    >>> logger = logging.getLogger("doctest.gelf")
    >>> logger.addHandler(handler)
    >>> logger.warning("low disk")
    >>> sent[0].short_message, int(sent[0].level)
    ('low disk', 4)
    >>> logger.removeHandler(handler)
    >>> handler.close()
    """

    def __init__(self, writer: GelfWriter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._writer = writer
        if not writer.initialised:
            writer.init()

    @property
    def writer(self) -> GelfWriter:
        return self._writer

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        try:
            entry = entry_from_record(record, self._writer.required_log_entry_values)
            self._writer.write(entry)
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def flush(self) -> None:
        self._writer.flush()

    def close(self) -> None:
        try:
            self._writer.close()
        finally:
            super().close()


__all__ = ["GelfHandler", "entry_from_record"]
