"""Controller settings with every default stated in one place."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import logging
from pathlib import Path
from typing import Any

from osproxy.core.device import DEFAULT_DEVICE, DeviceStrategy
from osproxy.core.storage import get_config_dir, load_json, save_json

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
_STRATEGIES: frozenset[str] = frozenset({"static", "preferred"})


@dataclass(frozen=True, slots=True)
class ControllerSettings:
    device_strategy: DeviceStrategy = "preferred"
    default_device: str = DEFAULT_DEVICE
    command_timeout_s: float = 10.0


_DEFAULTS = ControllerSettings()


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILE


def _coerce_field(name: str, value: Any) -> Any:
    if name == "device_strategy":
        if isinstance(value, str) and value.strip().lower() in _STRATEGIES:
            return value.strip().lower()
    elif name == "default_device":
        if isinstance(value, str) and value.strip():
            return value.strip()
    elif name == "command_timeout_s":
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return float(value)
    logger.warning("Ignoring invalid setting %s=%r; using default", name, value)
    return getattr(_DEFAULTS, name)


def settings_from_dict(data: Any) -> ControllerSettings:
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Settings payload is not an object; using defaults")
        return ControllerSettings()
    values: dict[str, Any] = {}
    for field in fields(ControllerSettings):
        if field.name in data:
            values[field.name] = _coerce_field(field.name, data[field.name])
    return ControllerSettings(**values)


def load_settings(path: Path | None = None) -> ControllerSettings:
    return settings_from_dict(load_json(path or get_settings_path(), None))


def save_settings(settings: ControllerSettings, path: Path | None = None) -> Path:
    target = path or get_settings_path()
    save_json(target, asdict(settings))
    return target
