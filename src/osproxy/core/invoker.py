"""Run platform commands without blocking the event loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shlex
from typing import Awaitable, Protocol, Sequence

from osproxy.core.errors import ExternalCommandError
from osproxy.core.logging_setup import redact

logger = logging.getLogger(__name__)

# Shell convention for "command not found".
SPAWN_FAILURE_EXIT_CODE = 127


class Invoker(Protocol):
    def __call__(self, executable: str, args: Sequence[str]) -> Awaitable[str]:
        ...


def _format_cmd(cmd: list[str]) -> str:
    try:
        return redact(shlex.join(cmd))
    except Exception:
        return redact(str(cmd))


class CommandInvoker:
    """Spawn a command and return its standard output.

    A nonzero exit, a spawn failure or a timeout raises ExternalCommandError.
    Empty output is returned as-is; callers decide whether it is usable.
    """

    def __init__(self, *, timeout_s: float | None = 10.0) -> None:
        self._timeout_s = timeout_s

    async def __call__(self, executable: str, args: Sequence[str]) -> str:
        cmd = [executable, *args]
        command_text = _format_cmd(cmd)
        logger.info("Running command: %s", command_text)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.exception("Command execution failed: %s", command_text)
            raise ExternalCommandError(SPAWN_FAILURE_EXIT_CODE, str(exc)) from exc

        try:
            stdout_b, stderr_b = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout_s
            )
        except asyncio.TimeoutError as exc:
            if process.returncode is None:
                # The child may exit between the timeout and the kill.
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
            returncode = await process.wait()
            logger.error("Command timed out after %ss: %s", self._timeout_s, command_text)
            raise ExternalCommandError(returncode or -1, "timed out") from exc

        stdout = stdout_b.decode("utf-8", errors="replace")
        stderr = stderr_b.decode("utf-8", errors="replace").strip()
        logger.info(
            "Command result rc=%s cmd=%s stdout=%r stderr=%r",
            process.returncode,
            command_text,
            redact(stdout.strip()),
            redact(stderr),
        )

        if process.returncode != 0:
            detail = stderr or stdout.strip() or "unknown error"
            logger.error(
                "Command failed rc=%s cmd=%s detail=%r",
                process.returncode,
                command_text,
                redact(detail),
            )
            raise ExternalCommandError(process.returncode, detail)

        return stdout
