"""Pick the network service that scopes proxy configuration.

`networksetup` addresses proxies by service name ("Wi-Fi", "USB 10/100/1000
LAN"), not by BSD interface name ("en0"). The "preferred" strategy asks the
routing table for the interface carrying the default route and then maps it to
its service name through the service order listing:

    (1) Wi-Fi
    (Hardware Port: Wi-Fi, Device: en0)

Disabled services are listed as `(*)` and never match.
"""

from __future__ import annotations

import logging
import re
from typing import Final, Literal

from osproxy.core.errors import DeviceResolutionError, ExternalCommandError
from osproxy.core.invoker import Invoker
from osproxy.core.platform_commands import PlatformCommands

logger = logging.getLogger(__name__)

DeviceStrategy = Literal["static", "preferred"]

DEFAULT_DEVICE: Final[str] = "Wi-Fi"
INTERFACE_LABEL: Final[str] = "interface"

_SERVICE_ORDER_RE: Final[re.Pattern[str]] = re.compile(
    r"^\(\d+\)\s+(.+?)\s*$\n^\(.*Device:\s*([^)\s]+)\s*\)\s*$",
    re.MULTILINE,
)


def extract_labeled_value(output: str, label: str) -> str | None:
    """Return `<name>` from the first `<label>: <name>` line, if any."""
    pattern = re.compile(rf"^\s*{re.escape(label)}\s*:\s*(\S.*?)\s*$", re.MULTILINE)
    match = pattern.search(output or "")
    return match.group(1) if match else None


def parse_service_order(output: str) -> dict[str, str]:
    """Map interface names to service names."""
    mapping: dict[str, str] = {}
    for service, interface in _SERVICE_ORDER_RE.findall(output or ""):
        mapping.setdefault(interface, service)
    return mapping


class DeviceResolver:
    def __init__(
        self,
        commands: PlatformCommands,
        invoker: Invoker,
        *,
        strategy: DeviceStrategy = "preferred",
        default_device: str = DEFAULT_DEVICE,
    ) -> None:
        if strategy not in ("static", "preferred"):
            raise ValueError(f"Unknown device strategy: {strategy!r}")
        self._commands = commands
        self._invoke = invoker
        self._strategy: DeviceStrategy = strategy
        self._default_device = default_device

    @property
    def strategy(self) -> DeviceStrategy:
        return self._strategy

    async def resolve(self, explicit: str | None = None) -> str:
        if isinstance(explicit, str) and explicit:
            return explicit
        if self._strategy == "static":
            return self._default_device
        return await self.discover()

    async def _query(self, executable: str, args: list[str]) -> str:
        try:
            return await self._invoke(executable, args)
        except ExternalCommandError as exc:
            raise DeviceResolutionError(
                f"Unable to determine network device: {executable} failed. {exc}",
                user_message="Unable to determine the active network service.",
            ) from exc

    async def discover(self) -> str:
        route_exe, route_args = self._commands.default_route_command()
        interface = extract_labeled_value(
            await self._query(route_exe, route_args), INTERFACE_LABEL
        )
        if not interface:
            raise DeviceResolutionError(
                "No default route interface found",
                user_message="Unable to determine the active network service.",
            )

        order_exe, order_args = self._commands.service_order_command()
        services = parse_service_order(await self._query(order_exe, order_args))
        service = services.get(interface)
        if not service:
            raise DeviceResolutionError(
                f"No network service uses interface {interface!r}",
                user_message=f"No network service found for interface {interface}.",
            )
        logger.info("Resolved network service %r for interface %s", service, interface)
        return service
