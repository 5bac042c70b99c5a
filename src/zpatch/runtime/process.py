"""Bounded external command execution."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

LOGGER = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 10.0


class CommandTimeout(RuntimeError):
    """Raised when an external command exceeds its timeout."""


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Captured output of a finished command."""

    command: tuple[str, ...]
    stdout: str
    stderr: str
    code: int

    @property
    def ok(self) -> bool:
        return self.code == 0


async def run_command(
    program: str,
    args: Sequence[str] = (),
    *,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> CommandResult:
    """Run ``program`` with ``args`` and capture its output.

    Raises :class:`CommandTimeout` after killing the process when it runs past
    ``timeout`` seconds, and ``OSError`` when ``program`` cannot be started.
    """

    command = (program, *args)
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as error:
        process.kill()
        await process.wait()
        raise CommandTimeout(f"{' '.join(command)} timed out after {timeout:g}s") from error

    result = CommandResult(
        command=command,
        stdout=stdout.decode("utf-8", errors="replace") if stdout else "",
        stderr=stderr.decode("utf-8", errors="replace") if stderr else "",
        code=process.returncode if process.returncode is not None else 1,
    )
    LOGGER.debug("%s exited with %d", " ".join(command), result.code)
    return result


__all__ = ["CommandResult", "CommandTimeout", "DEFAULT_COMMAND_TIMEOUT", "run_command"]
