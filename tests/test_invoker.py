from __future__ import annotations

import asyncio

import pytest

import osproxy.core.invoker as inv
from osproxy.core.errors import ExternalCommandError
from osproxy.core.invoker import CommandInvoker


class _FakeProcess:
    def __init__(self, returncode: int, stdout: bytes = b"", stderr: bytes = b"", delay: float = 0.0):
        self._final_returncode = returncode
        self.returncode: int | None = None
        self._stdout = stdout
        self._stderr = stderr
        self._delay = delay
        self.killed = False

    async def communicate(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        self.returncode = self._final_returncode
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode if self.returncode is not None else self._final_returncode


def _patch_spawn(monkeypatch, process: _FakeProcess, calls: list[list[str]]) -> None:
    async def fake_exec(*cmd, stdout, stderr):  # noqa: ANN001
        calls.append(list(cmd))
        return process

    monkeypatch.setattr(inv.asyncio, "create_subprocess_exec", fake_exec)


def test_invoker_returns_stdout(monkeypatch) -> None:
    calls: list[list[str]] = []
    _patch_spawn(monkeypatch, _FakeProcess(0, b"Enabled: No\nServer: \nPort: 0\n"), calls)

    output = asyncio.run(CommandInvoker()("networksetup", ["-getwebproxy", "Wi-Fi"]))

    assert output == "Enabled: No\nServer: \nPort: 0\n"
    assert calls == [["networksetup", "-getwebproxy", "Wi-Fi"]]


def test_invoker_returns_empty_output_unchanged(monkeypatch) -> None:
    _patch_spawn(monkeypatch, _FakeProcess(0), [])

    assert asyncio.run(CommandInvoker()("networksetup", ["-setwebproxystate", "Wi-Fi", "on"])) == ""


def test_invoker_raises_with_exit_code(monkeypatch) -> None:
    _patch_spawn(monkeypatch, _FakeProcess(14, b"", b"** Error: permission denied"), [])

    with pytest.raises(ExternalCommandError) as excinfo:
        asyncio.run(CommandInvoker()("networksetup", ["-setwebproxy", "Wi-Fi", "h", "80"]))

    assert excinfo.value.exit_code == 14
    assert str(excinfo.value) == "Exit code 14."
    assert "permission denied" in excinfo.value.detail


def test_invoker_spawn_failure_uses_command_not_found_code(monkeypatch) -> None:
    async def fake_exec(*cmd, stdout, stderr):  # noqa: ANN001
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(inv.asyncio, "create_subprocess_exec", fake_exec)

    with pytest.raises(ExternalCommandError) as excinfo:
        asyncio.run(CommandInvoker()("networksetup", ["-getwebproxy", "Wi-Fi"]))
    assert excinfo.value.exit_code == inv.SPAWN_FAILURE_EXIT_CODE


def test_invoker_kills_process_on_timeout(monkeypatch) -> None:
    process = _FakeProcess(0, b"late", delay=5.0)
    _patch_spawn(monkeypatch, process, [])

    with pytest.raises(ExternalCommandError) as excinfo:
        asyncio.run(CommandInvoker(timeout_s=0.01)("networksetup", ["-getwebproxy", "Wi-Fi"]))

    assert process.killed is True
    assert excinfo.value.exit_code == -9


def test_invoker_redacts_credentials_in_logs(monkeypatch, caplog) -> None:
    _patch_spawn(monkeypatch, _FakeProcess(0), [])
    caplog.set_level("INFO", logger=inv.__name__)

    asyncio.run(
        CommandInvoker()("networksetup", ["-setwebproxy", "Wi-Fi", "bob:hunter2@proxy", "80"])
    )

    assert "hunter2" not in caplog.text
    assert "bob:<redacted>@proxy" in caplog.text


def test_invoker_timeout_survives_child_exiting_before_kill(monkeypatch) -> None:
    class _ExitedProcess(_FakeProcess):
        def kill(self) -> None:
            raise ProcessLookupError(3, "No such process")

    process = _ExitedProcess(0, b"late", delay=5.0)
    _patch_spawn(monkeypatch, process, [])

    with pytest.raises(ExternalCommandError) as excinfo:
        asyncio.run(CommandInvoker(timeout_s=0.01)("networksetup", ["-getwebproxy", "Wi-Fi"]))

    assert excinfo.value.exit_code == -1
