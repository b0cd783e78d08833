"""Normalize `networksetup -getwebproxy` output into a ProxyConfig.

The platform tool answers with line-oriented `Key: Value` text, for example:

    Enabled: Yes
    Server: proxy.example.com
    Port: 8080
    Authenticated Proxy Enabled: 0

Only `Server`, `Port` and `Enabled` are read; other keys are ignored so newer
platform releases can add fields freely.
"""

from __future__ import annotations

import re
from typing import Final

from osproxy.core.errors import ParseError
from osproxy.core.is_on import is_enabled
from osproxy.core.models import MAX_PORT, ProxyConfig

_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^\s*([^:]+?)\s*:\s?(.*?)\s*$")


def parse_key_values(raw: str) -> dict[str, str]:
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError(
            "Expected non-empty text output",
            user_message="Proxy configuration output was empty.",
        )
    values: dict[str, str] = {}
    for line in raw.splitlines():
        if not line.strip():
            continue
        match = _LINE_RE.match(line)
        if match is None:
            continue
        values.setdefault(match.group(1), match.group(2))
    if not values:
        raise ParseError(
            f"Output is not `Key: Value` text: {raw!r}",
            user_message="Unrecognized proxy configuration output.",
        )
    return values


def _parse_port(raw: str) -> int:
    text = raw.strip()
    if not text:
        return 0
    if not (text.isascii() and text.isdigit()) or int(text) > MAX_PORT:
        raise ParseError(
            f"Invalid port value: {raw!r}",
            user_message="Proxy configuration reported an invalid port.",
        )
    return int(text)


def parse_proxy_output(raw: str) -> ProxyConfig:
    values = parse_key_values(raw)
    return ProxyConfig(
        hostname=values.get("Server", "").strip(),
        port=_parse_port(values.get("Port", "")),
        enabled=is_enabled(values.get("Enabled", False)),
    )
