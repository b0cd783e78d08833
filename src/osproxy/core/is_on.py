"""Decide whether a platform-reported value means "on"."""

from __future__ import annotations

from typing import Any, Final

_ON_WORDS: Final[frozenset[str]] = frozenset({"true", "yes", "on", "enabled"})


def is_enabled(value: Any) -> bool:
    # `1 == True`, so numbers must not reach a membership test against True.
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _ON_WORDS
    return False
