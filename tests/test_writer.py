from __future__ import annotations

import pytest

from lib_log_gelf.application.ports.transport import TransportConfig
from lib_log_gelf.domain.entries import CapturedError, LogEntry, LogEntryValue, StackFrame, ThreadInfo
from lib_log_gelf.domain.errors import UnknownLevelError, WriterInitError
from lib_log_gelf.domain.levels import GelfLevel, LogLevel
from lib_log_gelf.domain.messages import GelfMessage
from lib_log_gelf.settings import WriterConfig
from lib_log_gelf.writer import GelfWriter


class _RecordingClient:
    def __init__(self) -> None:
        self.sent: list[GelfMessage] = []
        self.stopped = 0

    def send(self, message: GelfMessage) -> None:
        self.sent.append(message)

    def stop(self) -> None:
        self.stopped += 1


class _RecordingHooks:
    def __init__(self) -> None:
        self.registered: list[object] = []
        self.unregistered: list[object] = []

    def register(self, closable: object) -> None:
        self.registered.append(closable)

    def unregister(self, closable: object) -> None:
        self.unregistered.append(closable)


@pytest.fixture
def client() -> _RecordingClient:
    return _RecordingClient()


@pytest.fixture
def hooks() -> _RecordingHooks:
    return _RecordingHooks()


def _writer(client: _RecordingClient, hooks: _RecordingHooks, **config) -> GelfWriter:
    config.setdefault("hostname", "api01")
    return GelfWriter(WriterConfig(**config), transport_factory=lambda _config: client, exit_hooks=hooks)


def test_init_builds_client_from_config_and_registers_exit_hook(hooks: _RecordingHooks) -> None:
    seen: list[TransportConfig] = []
    client = _RecordingClient()

    def factory(config: TransportConfig) -> _RecordingClient:
        seen.append(config)
        return client

    writer = GelfWriter(
        WriterConfig(server="gray.example", port=12202, transport="tcp", hostname="api01", queue_size=8),  # type: ignore[arg-type]
        transport_factory=factory,
        exit_hooks=hooks,
    )
    writer.init()

    assert writer.initialised is True
    assert seen[0].remote_address == ("gray.example", 12202)
    assert seen[0].protocol.value == "tcp"
    assert seen[0].queue_size == 8
    assert hooks.registered == [writer]


def test_init_failure_leaves_writer_uninitialised(hooks: _RecordingHooks) -> None:
    def factory(config: TransportConfig) -> _RecordingClient:
        raise OSError("connection refused")

    writer = GelfWriter(WriterConfig(server="gray.example", hostname="api01"), transport_factory=factory, exit_hooks=hooks)

    with pytest.raises(WriterInitError, match="gray.example:12201") as excinfo:
        writer.init()

    assert isinstance(excinfo.value.__cause__, OSError)
    assert writer.initialised is False
    assert hooks.registered == []


def test_init_twice_is_rejected(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)
    writer.init()

    with pytest.raises(RuntimeError, match="already"):
        writer.init()


def test_write_before_init_is_rejected(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)

    with pytest.raises(RuntimeError, match="init"):
        writer.write(LogEntry(0, LogLevel.INFO, "early"))


def test_write_sends_converted_message(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(
        client,
        hooks,
        static_fields={"env": "prod"},
        additional_log_entry_values=frozenset({LogEntryValue.THREAD, LogEntryValue.EXCEPTION}),
    )
    writer.init()
    error = CapturedError("RuntimeError", "BOOM!", (StackFrame("app.jobs", "run", "jobs.py", 12),))

    writer.write(LogEntry(1_700_000_000_500, LogLevel.ERROR, "job failed", thread=ThreadInfo("worker-1"), error=error))

    message = client.sent[0]
    assert message.short_message == "job failed"
    assert message.full_message == "job failed\n\napp.jobs.run(jobs.py:12)"
    assert message.host == "api01"
    assert message.level is GelfLevel.ERROR
    assert message.timestamp == pytest.approx(1700000000.5)
    assert message.additional_fields == {
        "env": "prod",
        "threadName": "worker-1",
        "exceptionClass": "RuntimeError",
        "exceptionMessage": "BOOM!",
        "exceptionStackTrace": "app.jobs.run(jobs.py:12)",
    }


def test_write_propagates_client_failures(hooks: _RecordingHooks) -> None:
    class _FailingClient(_RecordingClient):
        def send(self, message: GelfMessage) -> None:
            raise RuntimeError("queue full")

    writer = _writer(_FailingClient(), hooks)
    writer.init()

    with pytest.raises(RuntimeError, match="queue full"):
        writer.write(LogEntry(0, LogLevel.INFO, "dropped"))


def test_write_rejects_unmapped_levels(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)
    writer.init()

    with pytest.raises(UnknownLevelError):
        writer.write(LogEntry(0, "FATAL", "bad level"))  # type: ignore[arg-type]
    assert client.sent == []


def test_write_to_uses_given_client(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    other = _RecordingClient()
    writer = _writer(client, hooks)

    writer.write_to(other, LogEntry(0, LogLevel.DEBUG, "direct"))

    assert [message.short_message for message in other.sent] == ["direct"]
    assert client.sent == []


def test_flush_does_not_touch_client(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)
    writer.init()

    writer.flush()

    assert client.stopped == 0
    assert writer.initialised is True


def test_close_stops_client_once_and_unregisters(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)
    writer.init()

    writer.close()
    writer.close()

    assert client.stopped == 1
    assert hooks.unregistered == [writer, writer]
    assert writer.initialised is False
    with pytest.raises(RuntimeError, match="after close"):
        writer.init()
    with pytest.raises(RuntimeError, match="init"):
        writer.write(LogEntry(0, LogLevel.INFO, "late"))


def test_close_without_init_is_harmless(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks)

    writer.close()

    assert client.stopped == 0


def test_context_manager_closes_on_exit(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    with _writer(client, hooks) as writer:
        writer.write(LogEntry(0, LogLevel.WARNING, "inside"))

    assert client.stopped == 1
    assert client.sent[0].level is GelfLevel.WARNING


def test_accessors_expose_resolved_configuration(client: _RecordingClient, hooks: _RecordingHooks) -> None:
    writer = _writer(client, hooks, static_fields=["team:core"])

    assert writer.hostname == "api01"
    assert dict(writer.static_fields) == {"team": "core"}
    assert LogEntryValue.RENDERED_TEXT in writer.required_log_entry_values
    assert writer.config.server == "localhost"
