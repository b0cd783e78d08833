"""Value types exchanged with callers of the proxy controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from osproxy.core.errors import ValidationError

MAX_PORT: Final[int] = 65535


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    hostname: str = ""
    port: int = 0
    enabled: bool = False

    @property
    def host(self) -> str:
        if not self.hostname:
            return ""
        if self.port:
            return f"{self.hostname}:{self.port}"
        return self.hostname

    def as_dict(self) -> dict[str, Any]:
        return {"hostname": self.hostname, "port": self.port, "enabled": self.enabled}


def coerce_port(value: Any) -> int | str:
    """Turn caller input into a port argument.

    Integers and decimal strings become ints in [0, 65535]. The empty string
    stays empty and means "no port configured".
    """
    if isinstance(value, bool):
        raise ValidationError(f"port must be an integer, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ""
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"port must be an integer, got {value!r}")
        value = int(text)
    if not isinstance(value, int):
        raise ValidationError(f"port must be an integer, got {value!r}")
    if not 0 <= value <= MAX_PORT:
        raise ValidationError(f"port must be between 0 and {MAX_PORT}, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class ProxyRequest:
    """Write request for `ProxyController.set`.

    `enabled=None` means the caller did not say; the platform enables the
    proxy as a side effect of writing it. Only an explicit `False` forces a
    follow-up disable.
    """

    hostname: str | None = None
    port: int | str | None = None
    enabled: bool | None = None
    device: str | None = None

    @classmethod
    def from_host(
        cls,
        host: str,
        *,
        enabled: bool | None = None,
        device: str | None = None,
    ) -> "ProxyRequest":
        raw = (host or "").strip()
        hostname, sep, port = raw.rpartition(":")
        if not sep:
            return cls(hostname=raw, port="", enabled=enabled, device=device)
        return cls(hostname=hostname, port=port, enabled=enabled, device=device)

    def validated(self) -> tuple[str, str]:
        """Return the hostname and port command arguments, or raise."""
        if self.hostname is None:
            raise ValidationError(
                "hostname must be provided.",
                user_message="A proxy hostname is required.",
            )
        if not isinstance(self.hostname, str):
            raise ValidationError(f"hostname must be a string, got {self.hostname!r}")
        if self.port is None:
            raise ValidationError(
                "port must be provided.",
                user_message="A proxy port is required.",
            )
        if self.enabled is not None and not isinstance(self.enabled, bool):
            raise ValidationError(f"enabled must be a boolean, got {self.enabled!r}")
        return self.hostname.strip(), str(coerce_port(self.port))


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    path: str

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise ValidationError(f"Path must be a string, got {self.path!r}")
