from __future__ import annotations

import asyncio

import osproxy.core.os_proxy as op
from osproxy.core.controller import ProxyController
from osproxy.core.models import ChangeEvent, ProxyConfig, ProxyRequest
from osproxy.core.os_proxy import OsProxy
from osproxy.core.platform_commands import DarwinCommands
from osproxy.core.settings import ControllerSettings
from osproxy.core.watcher import ChangeWatcher


class _FakeHandle:
    def __init__(self, on_change, parent) -> None:  # noqa: ANN001
        self.on_change = on_change
        self.paths: list[str] = []

    def add(self, paths: list[str]) -> list[str]:
        self.paths.extend(paths)
        return list(paths)

    def remove(self, paths: list[str]) -> None:
        for path in paths:
            self.paths.remove(path)


def _os_proxy(store: dict[str, str], calls: list[list[str]]) -> OsProxy:
    async def fake_invoke(executable, args):  # noqa: ANN001
        cmd = [executable, *args]
        calls.append(cmd)
        if cmd[1] == "-getwebproxy":
            return f"Enabled: {store['Enabled']}\nServer: {store['Server']}\nPort: {store['Port']}\n"
        if cmd[1] == "-setwebproxy":
            store.update(Server=cmd[3], Port=cmd[4], Enabled="Yes")
            return ""
        store["Enabled"] = "Yes" if cmd[3] == "on" else "No"
        return ""

    commands = DarwinCommands()
    controller = ProxyController(
        settings=ControllerSettings(device_strategy="static"),
        commands=commands,
        invoker=fake_invoke,
    )
    watcher = ChangeWatcher(default_path=commands.config_path, handle_factory=_FakeHandle)
    return OsProxy(controller=controller, watcher=watcher)


def test_os_proxy_round_trip_through_store() -> None:
    calls: list[list[str]] = []
    store = {"Enabled": "No", "Server": "", "Port": "0"}
    proxy = _os_proxy(store, calls)

    async def scenario() -> list[ProxyConfig]:
        seen = []
        await proxy.set(ProxyRequest.from_host("proxy.corp:3128"))
        seen.append(await proxy.get())
        await proxy.toggle()
        seen.append(await proxy.get())
        await proxy.enable()
        await proxy.disable()
        await proxy.clear()
        seen.append(await proxy.get())
        return seen

    seen = asyncio.run(scenario())

    assert seen == [
        ProxyConfig(hostname="proxy.corp", port=3128, enabled=True),
        ProxyConfig(hostname="proxy.corp", port=3128, enabled=False),
        ProxyConfig(hostname="", port=0, enabled=False),
    ]


def test_os_proxy_watch_notifies_changed_subscribers() -> None:
    proxy = _os_proxy({"Enabled": "No", "Server": "", "Port": "0"}, [])
    events: list[ChangeEvent] = []
    proxy.changed.connect(lambda event: events.append(event))

    session = proxy.watch()
    session.handle.on_change(DarwinCommands.config_path)
    proxy.unwatch()

    assert events == [ChangeEvent(path=DarwinCommands.config_path)]
    assert session.paths == ()


def test_get_os_proxy_is_process_wide(monkeypatch) -> None:
    proxy = _os_proxy({"Enabled": "No", "Server": "", "Port": "0"}, [])
    created: list[OsProxy] = []

    def fake_os_proxy() -> OsProxy:
        created.append(proxy)
        return proxy

    monkeypatch.setattr(op, "_default", None)
    monkeypatch.setattr(op, "OsProxy", fake_os_proxy)

    assert op.get_os_proxy() is op.get_os_proxy()
    assert len(created) == 1


def test_calling_os_proxy_sets_and_remove_clears() -> None:
    calls: list[list[str]] = []
    store = {"Enabled": "No", "Server": "", "Port": "0"}
    proxy = _os_proxy(store, calls)

    asyncio.run(proxy({"hostname": "proxy.corp", "port": 8080}))
    assert store == {"Enabled": "Yes", "Server": "proxy.corp", "Port": "8080"}

    asyncio.run(proxy.remove())
    assert store == {"Enabled": "No", "Server": "", "Port": ""}
    assert calls[-2:] == [
        ["networksetup", "-setwebproxy", "Wi-Fi", "", ""],
        ["networksetup", "-setwebproxystate", "Wi-Fi", "off"],
    ]
