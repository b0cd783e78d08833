from __future__ import annotations

import pytest

from osproxy.core.errors import UnsupportedPlatformError
from osproxy.core.platform_commands import (
    DarwinCommands,
    get_platform_commands,
    supported_platforms,
)


def test_darwin_command_surface() -> None:
    commands = get_platform_commands("darwin")
    assert isinstance(commands, DarwinCommands)
    assert commands.tool == "networksetup"
    assert commands.get_args("Wi-Fi") == ["-getwebproxy", "Wi-Fi"]
    assert commands.set_args("Wi-Fi", "localhost", "8000") == [
        "-setwebproxy",
        "Wi-Fi",
        "localhost",
        "8000",
    ]
    assert commands.state_args("Wi-Fi", True) == ["-setwebproxystate", "Wi-Fi", "on"]
    assert commands.state_args("Wi-Fi", False) == ["-setwebproxystate", "Wi-Fi", "off"]
    assert commands.config_path == "/Library/Preferences/SystemConfiguration/preferences.plist"


def test_unsupported_platform_fails_fast() -> None:
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        get_platform_commands("win32")
    assert "win32" in excinfo.value.user_message
    assert "darwin" in supported_platforms()


def test_default_platform_follows_sys_platform(monkeypatch) -> None:
    import osproxy.core.platform_commands as pc

    monkeypatch.setattr(pc.sys, "platform", "darwin")
    assert isinstance(get_platform_commands(), DarwinCommands)

    monkeypatch.setattr(pc.sys, "platform", "linux")
    with pytest.raises(UnsupportedPlatformError):
        get_platform_commands()
