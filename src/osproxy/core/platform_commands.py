"""Platform command tables and their registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
import sys
from typing import ClassVar

from osproxy.core.errors import UnsupportedPlatformError

# Registry of command tables keyed by `sys.platform` value
_platform_registry: dict[str, type["PlatformCommands"]] = {}


def register_platform(cls: type["PlatformCommands"]) -> type["PlatformCommands"]:
    """Decorator to register a command table under its platform name."""
    _platform_registry[cls.platform] = cls
    return cls


class PlatformCommands(ABC):
    """Abstract command table for one operating system.

    Subclasses know which executable manages proxy settings, how to spell
    each operation's arguments, and where the OS keeps its network
    preferences database.
    """

    platform: ClassVar[str]  # `sys.platform` value (e.g., "darwin")
    tool: ClassVar[str]  # Executable that reads and writes proxy settings
    config_path: ClassVar[str]  # Network preferences store watched for changes

    @abstractmethod
    def get_args(self, device: str) -> list[str]:
        ...

    @abstractmethod
    def set_args(self, device: str, hostname: str, port: str) -> list[str]:
        ...

    @abstractmethod
    def state_args(self, device: str, enabled: bool) -> list[str]:
        ...

    @abstractmethod
    def default_route_command(self) -> tuple[str, list[str]]:
        """Command whose output names the interface of the default route.

        Returns:
            Executable and argument list
        """
        ...

    @abstractmethod
    def service_order_command(self) -> tuple[str, list[str]]:
        """Command whose output maps interfaces to network service names.

        Returns:
            Executable and argument list
        """
        ...


@register_platform
class DarwinCommands(PlatformCommands):
    """macOS: `networksetup` over the SystemConfiguration preferences."""

    platform = "darwin"
    tool = "networksetup"
    config_path = "/Library/Preferences/SystemConfiguration/preferences.plist"

    def get_args(self, device: str) -> list[str]:
        return ["-getwebproxy", device]

    def set_args(self, device: str, hostname: str, port: str) -> list[str]:
        return ["-setwebproxy", device, hostname, port]

    def state_args(self, device: str, enabled: bool) -> list[str]:
        return ["-setwebproxystate", device, "on" if enabled else "off"]

    def default_route_command(self) -> tuple[str, list[str]]:
        return "route", ["-n", "get", "default"]

    def service_order_command(self) -> tuple[str, list[str]]:
        return self.tool, ["-listnetworkserviceorder"]


def supported_platforms() -> list[str]:
    return sorted(_platform_registry)


def get_platform_commands(platform: str | None = None) -> PlatformCommands:
    """Return the command table for `platform` (default: this host).

    Raises:
        UnsupportedPlatformError: no table is registered for the platform
    """
    name = platform or sys.platform
    cls = _platform_registry.get(name)
    if cls is None:
        raise UnsupportedPlatformError(
            f"Support for {name} is not ready yet.",
            user_message=(
                f"System proxy configuration is not supported on {name}. "
                f"Supported: {', '.join(supported_platforms())}."
            ),
        )
    return cls()
