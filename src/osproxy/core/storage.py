"""Where osproxy keeps its files, and tolerant JSON persistence for them."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from platformdirs import user_config_path, user_state_path

logger = logging.getLogger(__name__)

APP_NAME = "osproxy"


def get_config_dir() -> Path:
    return Path(user_config_path(APP_NAME))


def get_logs_dir() -> Path:
    return Path(user_state_path(APP_NAME)) / "logs"


def load_json(path: Path, default: Any) -> Any:
    """Return the decoded document at `path`, or `default` if it cannot be read.

    A missing file, an unreadable file, bytes that are not UTF-8 and text that
    is not JSON all count as "no document".
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return default
    except OSError as exc:
        logger.warning("Unable to read %s (%s); using defaults", path, exc)
        return default
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring corrupt file %s (%s); using defaults", path, exc)
        return default


def save_json(path: Path, data: Any) -> None:
    """Replace `path` with `data` in one rename so readers never see half a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)
            handle.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
