"""Read and change the operating system's web proxy configuration.

Every operation goes through the platform tool; the controller keeps no
mutable state of its own, so operations may run concurrently. The OS store
itself is not transactional: `set` with `enabled=False` and `toggle` each take
two separate commands, and another program may change the store in between.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from osproxy.core.device import DeviceResolver
from osproxy.core.errors import (
    CommandError,
    EmptyOutputError,
    ProxyOperationError,
    ValidationError,
)
from osproxy.core.invoker import CommandInvoker, Invoker
from osproxy.core.logging_setup import redact
from osproxy.core.models import ProxyConfig, ProxyRequest
from osproxy.core.output_parser import parse_proxy_output
from osproxy.core.platform_commands import PlatformCommands, get_platform_commands
from osproxy.core.settings import ControllerSettings, load_settings

logger = logging.getLogger(__name__)


class ProxyController:
    def __init__(
        self,
        *,
        settings: ControllerSettings | None = None,
        commands: PlatformCommands | None = None,
        invoker: Invoker | None = None,
        resolver: DeviceResolver | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._commands = commands or get_platform_commands()
        self._invoke: Invoker = invoker or CommandInvoker(
            timeout_s=self._settings.command_timeout_s
        )
        self._resolver = resolver or DeviceResolver(
            self._commands,
            self._invoke,
            strategy=self._settings.device_strategy,
            default_device=self._settings.default_device,
        )

    @property
    def commands(self) -> PlatformCommands:
        return self._commands

    @property
    def settings(self) -> ControllerSettings:
        return self._settings

    async def _run(self, operation: str, args: list[str]) -> str:
        try:
            return await self._invoke(self._commands.tool, args)
        except CommandError as exc:
            raise ProxyOperationError(operation, exc) from exc

    async def get(self, device: str | None = None) -> ProxyConfig:
        """Return the proxy currently configured for the device."""
        name = await self._resolver.resolve(device)
        output = await self._run("get", self._commands.get_args(name))
        if not output.strip():
            reason = EmptyOutputError()
            raise ProxyOperationError("get", reason) from reason
        return parse_proxy_output(output)

    async def set(self, request: ProxyRequest | Mapping[str, Any]) -> None:
        """Write hostname and port, leaving the proxy enabled unless told otherwise.

        The platform turns the proxy on whenever it is written. An explicit
        `enabled=False` is honoured with a second, separate disable command; if
        that one fails its error propagates and the proxy stays enabled.
        """
        if isinstance(request, Mapping):
            try:
                request = ProxyRequest(**request)
            except TypeError as exc:
                raise ValidationError(f"Invalid proxy request: {exc}") from exc
        hostname, port = request.validated()
        name = await self._resolver.resolve(request.device)
        await self._run("set", self._commands.set_args(name, hostname, port))
        logger.info("Set web proxy on %r to %r port %r", name, redact(hostname), port)
        if request.enabled is False:
            await self.disable(name)

    async def _set_state(self, enabled: bool, device: str | None) -> None:
        operation = "enable" if enabled else "disable"
        name = await self._resolver.resolve(device)
        await self._run(operation, self._commands.state_args(name, enabled))
        logger.info("Web proxy on %r turned %s", name, "on" if enabled else "off")

    async def enable(self, device: str | None = None) -> None:
        await self._set_state(True, device)

    async def disable(self, device: str | None = None) -> None:
        """Turn the proxy off, keeping its hostname and port in the store."""
        await self._set_state(False, device)

    async def toggle(self, device: str | None = None) -> bool:
        """Flip the proxy state and return the new one."""
        name = await self._resolver.resolve(device)
        try:
            current = await self.get(name)
            if current.enabled:
                await self.disable(name)
            else:
                await self.enable(name)
        except ProxyOperationError as exc:
            raise ProxyOperationError("toggle", exc.reason) from exc
        return not current.enabled

    async def clear(self, device: str | None = None) -> None:
        """Wipe hostname and port and leave the proxy disabled."""
        try:
            await self.set(ProxyRequest(hostname="", port="", enabled=False, device=device))
        except ProxyOperationError as exc:
            raise ProxyOperationError("clear", exc.reason) from exc
