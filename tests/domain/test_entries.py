from __future__ import annotations

import pytest

from lib_log_gelf.domain.entries import (
    NO_LINE_NUMBER,
    CapturedError,
    LogEntry,
    LogEntryValue,
    StackFrame,
)
from lib_log_gelf.domain.errors import ConfigurationError
from lib_log_gelf.domain.levels import LogLevel


class PaymentDeclined(Exception):
    pass


def _charge() -> None:
    raise PaymentDeclined("card expired")


def _checkout() -> None:
    _charge()


def test_entry_defaults_leave_optional_values_absent() -> None:
    entry = LogEntry(timestamp=1, level=LogLevel.INFO, rendered_text="hi")

    assert entry.process_id is None
    assert entry.thread is None
    assert entry.line_number == NO_LINE_NUMBER
    assert entry.error is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("exception", LogEntryValue.EXCEPTION),
        ("PROCESS_ID", LogEntryValue.PROCESS_ID),
        ("date", LogEntryValue.TIMESTAMP),
        ("RENDERED_LOG_ENTRY", LogEntryValue.RENDERED_TEXT),
    ],
)
def test_log_entry_value_from_name(name: str, expected: LogEntryValue) -> None:
    assert LogEntryValue.from_name(name) is expected


def test_log_entry_value_rejects_unknown_names() -> None:
    with pytest.raises(ConfigurationError, match="Unknown log entry value"):
        LogEntryValue.from_name("context")


def test_captured_error_orders_frames_innermost_first() -> None:
    try:
        _checkout()
    except PaymentDeclined as exc:
        error = CapturedError.from_exception(exc)

    assert error.type_name == f"{__name__}.PaymentDeclined"
    assert error.message == "card expired"
    assert [frame.method_name for frame in error.frames] == [
        "_charge",
        "_checkout",
        "test_captured_error_orders_frames_innermost_first",
    ]
    assert all(frame.class_name == __name__ for frame in error.frames)
    assert error.frames[0].file_name == "test_entries.py"
    assert error.frames[0].line_number > 0


def test_captured_error_for_builtin_without_message() -> None:
    try:
        raise KeyError()
    except KeyError as exc:
        error = CapturedError.from_exception(exc)

    assert error.type_name == "KeyError"
    assert error.message is None
    assert len(error.frames) == 1


def test_captured_error_without_traceback_has_no_frames() -> None:
    error = CapturedError.from_exception(ValueError("never raised"))

    assert error.frames == ()
    assert error.message == "never raised"


def test_stack_frame_render_keeps_missing_file_visible() -> None:
    assert StackFrame("pkg.mod", "fn", None, 3).render() == "pkg.mod.fn(None:3)"
