"""One object exposing the whole proxy API, change stream included."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from osproxy.core.controller import ProxyController
from osproxy.core.models import ProxyConfig, ProxyRequest
from osproxy.core.watcher import ChangeWatcher, PathArg, WatchSession

_default: "OsProxy | None" = None


class OsProxy:
    def __init__(
        self,
        *,
        controller: ProxyController | None = None,
        watcher: ChangeWatcher | None = None,
    ) -> None:
        self.controller = controller or ProxyController()
        self.watcher = watcher or ChangeWatcher(
            default_path=self.controller.commands.config_path
        )

    @property
    def changed(self):
        """Signal emitting a ChangeEvent whenever a watched path changes."""
        return self.watcher.changed

    async def get(self, device: str | None = None) -> ProxyConfig:
        return await self.controller.get(device)

    async def set(self, request: ProxyRequest | Mapping[str, Any]) -> None:
        await self.controller.set(request)

    async def __call__(self, request: ProxyRequest | Mapping[str, Any]) -> None:
        """Calling the object is shorthand for `set`."""
        await self.set(request)

    async def enable(self, device: str | None = None) -> None:
        await self.controller.enable(device)

    async def disable(self, device: str | None = None) -> None:
        await self.controller.disable(device)

    async def toggle(self, device: str | None = None) -> bool:
        return await self.controller.toggle(device)

    async def clear(self, device: str | None = None) -> None:
        await self.controller.clear(device)

    remove = clear

    def watch(self, paths: PathArg | Iterable[PathArg] | None = None) -> WatchSession:
        return self.watcher.watch(paths)

    def unwatch(self, paths: PathArg | Iterable[PathArg] | None = None) -> None:
        self.watcher.unwatch(paths)


def get_os_proxy() -> OsProxy:
    """Return the process-wide instance, which owns the only watch session."""
    global _default
    if _default is None:
        _default = OsProxy()
    return _default
