"""Diagnostics collection."""

from __future__ import annotations

import os
import platform
import shutil
import sys

from osproxy.core.controller import ProxyController
from osproxy.core.errors import AppError, UnsupportedPlatformError
from osproxy.core.platform_commands import get_platform_commands
from osproxy.core.settings import get_settings_path
from osproxy.core.storage import get_logs_dir


def _tool_available(name: str) -> bool:
    return shutil.which(name) is not None


async def collect_diagnostics(controller: ProxyController | None = None) -> str:
    lines: list[str] = []
    lines.append("osproxy diagnostics")
    lines.append("")

    lines.append("System")
    lines.append(f"- OS: {platform.system()} {platform.release()}")
    lines.append(f"- Platform: {sys.platform}")
    lines.append(f"- Python: {sys.version.split()[0]}")
    lines.append("")

    lines.append("Tools")
    lines.append(f"- networksetup: {'yes' if _tool_available('networksetup') else 'no'}")
    lines.append(f"- route: {'yes' if _tool_available('route') else 'no'}")
    lines.append("")

    settings_path = get_settings_path()
    lines.append("Paths")
    lines.append(f"- Logs: {get_logs_dir()}")
    lines.append(
        f"- Settings: {'present' if settings_path.exists() else 'absent'} ({settings_path})"
    )

    if controller is None:
        try:
            commands = get_platform_commands()
        except UnsupportedPlatformError:
            lines.append("- Network preferences: unknown")
            lines.append("")
            lines.append("System Proxy")
            lines.append(f"- unsupported platform ({sys.platform})")
            lines.append("")
            return "\n".join(lines)
        controller = ProxyController(commands=commands)

    config_path = controller.commands.config_path
    lines.append(
        f"- Network preferences: {'present' if os.path.exists(config_path) else 'absent'}"
        f" ({config_path})"
    )
    lines.append("")

    lines.append("System Proxy")
    lines.append(f"- Device strategy: {controller.settings.device_strategy}")
    try:
        config = await controller.get()
    except AppError as exc:
        lines.append(f"- Error reading proxy: {exc.user_message}")
    else:
        lines.append(f"- Enabled: {'yes' if config.enabled else 'no'}")
        lines.append(f"- Host: {config.host or '(none)'}")
    lines.append("")

    return "\n".join(lines)
