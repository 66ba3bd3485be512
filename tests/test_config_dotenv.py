from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_log_gelf import cli as cli_module
from lib_log_gelf import config as log_config
from lib_log_gelf.domain.entries import LogEntryValue
from lib_log_gelf.domain.errors import ConfigurationError
from lib_log_gelf.domain.transports import TransportProtocol


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> None:
    """Reset shared dotenv state around each test."""

    log_config._reset_dotenv_state_for_testing()
    yield
    log_config._reset_dotenv_state_for_testing()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values into the process environment."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_GELF_SERVER=gray.dotenv\n")
    monkeypatch.chdir(nested)
    monkeypatch.delenv("LOG_GELF_SERVER", raising=False)

    loaded = log_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LOG_GELF_SERVER"] == "gray.dotenv"
    assert log_config.load_writer_config({"hostname": "api01"}).server == "gray.dotenv"

    os.environ.pop("LOG_GELF_SERVER", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    nested = tmp_path / "nested"
    nested.mkdir()
    (tmp_path / ".env").write_text("LOG_GELF_SERVER=gray.dotenv\n")
    monkeypatch.chdir(nested)
    monkeypatch.setenv("LOG_GELF_SERVER", "gray.real")

    result = log_config.enable_dotenv()

    assert result is not None
    assert os.environ["LOG_GELF_SERVER"] == "gray.real"


def test_enable_dotenv_without_file_returns_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert log_config.enable_dotenv() is None


def test_enable_dotenv_caches_loaded_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_GELF_PORT=12209\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_GELF_PORT", raising=False)

    first = log_config.enable_dotenv()
    env_file.unlink()
    second = log_config.enable_dotenv()

    assert first == second == env_file.resolve()

    os.environ.pop("LOG_GELF_PORT", None)


def test_environment_overrides_properties() -> None:
    config = log_config.load_writer_config(
        {"server": "gray.example", "port": 12201, "hostname": "api01"},
        environ={
            "LOG_GELF_SERVER": "gray.env",
            "LOG_GELF_PORT": "12202",
            "LOG_GELF_TRANSPORT": "TCP",
            "LOG_GELF_ADDITIONAL_VALUES": "PROCESS_ID,EXCEPTION",
            "LOG_GELF_STATIC_FIELDS": "env:prod",
            "LOG_GELF_TCP_NO_DELAY": "1",
            "LOG_GELF_HOSTNAME": "   ",
        },
    )

    assert config.server == "gray.env"
    assert config.port == 12202
    assert config.transport is TransportProtocol.TCP
    assert config.hostname == "api01"
    assert config.additional_log_entry_values == {LogEntryValue.PROCESS_ID, LogEntryValue.EXCEPTION}
    assert dict(config.static_fields) == {"env": "prod"}
    assert config.tcp_no_delay is True


def test_overrides_beat_environment_and_properties() -> None:
    config = log_config.load_writer_config(
        {"server": "gray.props", "hostname": "api01"},
        environ={"LOG_GELF_SERVER": "gray.env", "LOG_GELF_PORT": "12202"},
        overrides={"server": "gray.flag"},
    )

    assert config.server == "gray.flag"
    assert config.port == 12202


def test_environment_errors_surface_as_configuration_errors() -> None:
    with pytest.raises(ConfigurationError, match="port"):
        log_config.load_writer_config({"hostname": "api01"}, environ={"LOG_GELF_PORT": "twelve"})


@pytest.mark.parametrize(
    ("explicit", "env_value", "expected"),
    [
        (True, None, True),
        (False, "1", False),
        (None, "yes", True),
        (None, "off", False),
        (None, None, False),
    ],
)
def test_should_use_dotenv(explicit: bool | None, env_value: str | None, expected: bool) -> None:
    assert log_config.should_use_dotenv(explicit=explicit, env_value=env_value) is expected


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(log_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(log_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {log_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["info"], env=env)
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {log_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env=env)
    assert result.exit_code == 0
    assert calls == []
