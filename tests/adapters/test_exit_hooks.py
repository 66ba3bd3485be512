from __future__ import annotations

import atexit
import logging

import pytest

from lib_log_gelf.adapters.exit_hooks import ExitHookRegistry


class _Resource:
    def __init__(self, name: str, calls: list[str], *, fail: bool = False) -> None:
        self.name = name
        self.calls = calls
        self.fail = fail

    def close(self) -> None:
        self.calls.append(self.name)
        if self.fail:
            raise OSError(f"{self.name} close failed")


def test_run_closes_newest_first_and_empties_registry() -> None:
    calls: list[str] = []
    registry = ExitHookRegistry(install=False)
    registry.register(_Resource("first", calls))
    registry.register(_Resource("second", calls))

    registry.run()
    registry.run()

    assert calls == ["second", "first"]
    assert len(registry) == 0


def test_register_is_idempotent_and_unregister_tolerates_unknown() -> None:
    calls: list[str] = []
    registry = ExitHookRegistry(install=False)
    resource = _Resource("res", calls)

    registry.register(resource)
    registry.register(resource)
    assert len(registry) == 1

    registry.unregister(resource)
    registry.unregister(resource)
    registry.run()

    assert resource not in registry
    assert calls == []


def test_run_logs_and_continues_after_failures(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[str] = []
    registry = ExitHookRegistry(install=False)
    registry.register(_Resource("ok", calls))
    registry.register(_Resource("broken", calls, fail=True))

    with caplog.at_level(logging.ERROR, logger="lib_log_gelf.adapters.exit_hooks"):
        registry.run()

    assert calls == ["broken", "ok"]
    assert "Exit hook failed" in caplog.text


def test_first_register_installs_atexit_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    installed: list[object] = []
    monkeypatch.setattr(atexit, "register", lambda fn: installed.append(fn))
    registry = ExitHookRegistry()

    registry.register(_Resource("a", []))
    registry.register(_Resource("b", []))

    assert installed == [registry.run]
