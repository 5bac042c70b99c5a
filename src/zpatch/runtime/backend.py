"""Zellij pane backend.

Pane creation uses ``zellij action new-pane --name <name>``, which focuses the
new pane; commands are typed with ``zellij action write-chars`` into whatever
pane has focus. The two steps therefore run back to back under one
:class:`~zpatch.runtime.lock.FifoLock`. Features the Zellij CLI lacks
(border colours, rebalancing, hide/show) are no-ops.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from .detection import is_inside_zellij, is_zellij_available
from .lock import FifoLock
from .process import DEFAULT_COMMAND_TIMEOUT, CommandResult, run_command

LOGGER = logging.getLogger(__name__)

ZELLIJ_BIN = "zellij"
CARRIAGE_RETURN = "13"

Runner = Callable[..., Awaitable[CommandResult]]


class PaneCommandError(RuntimeError):
    """Raised when a ``zellij action`` exits non-zero."""

    def __init__(self, message: str, *, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


@dataclass(slots=True, frozen=True)
class TeammatePane:
    pane_id: str
    is_first_teammate: bool


class ZellijBackend:
    """Pane backend driving the ``zellij`` CLI."""

    type = "zellij"
    display_name = "Zellij"
    supports_hide_show = False

    def __init__(
        self,
        *,
        lock: FifoLock | None = None,
        runner: Runner = run_command,
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
        pane_init_delay: float = 0.2,
    ) -> None:
        self.lock = lock or FifoLock()
        self._runner = runner
        self._command_timeout = command_timeout
        self._pane_init_delay = pane_init_delay
        self._pane_count = 0

    async def is_available(self) -> bool:
        if is_inside_zellij():
            return True
        return await is_zellij_available(timeout=self._command_timeout)

    async def is_running_inside(self) -> bool:
        return is_inside_zellij()

    async def _action(self, args: Sequence[str]) -> CommandResult:
        return await self._runner(ZELLIJ_BIN, ["action", *args], timeout=self._command_timeout)

    async def spawn_teammate(self, name: str, command: str) -> TeammatePane:
        """Create a pane for ``name`` and start ``command`` in it.

        Creation and the keystrokes that follow hold the lock together; it is
        released on every exit path, including timeouts and failed actions.
        """

        async with self.lock:
            is_first = self._pane_count == 0
            self._pane_count += 1
            pane_id = f"zellij-{name}-{self._pane_count}"

            created = await self._action(["new-pane", "--name", name])
            if not created.ok:
                raise PaneCommandError(f"Failed to create Zellij pane for {name}: {created.stderr}", result=created)
            LOGGER.debug("Created teammate pane for %s: pane_id=%s, is_first=%s", name, pane_id, is_first)

            if self._pane_init_delay > 0:
                await asyncio.sleep(self._pane_init_delay)

            written = await self._action(["write-chars", command])
            if not written.ok:
                raise PaneCommandError(
                    f"Failed to write command to Zellij pane {pane_id}: {written.stderr}", result=written
                )
            entered = await self._action(["write", CARRIAGE_RETURN])
            if not entered.ok:
                raise PaneCommandError(f"Failed to send Enter to Zellij pane {pane_id}: {entered.stderr}", result=entered)
            LOGGER.debug("Sent command to pane %s", pane_id)

        return TeammatePane(pane_id=pane_id, is_first_teammate=is_first)

    async def set_pane_border_color(self, pane_id: str, color: str, is_external: bool = False) -> None:
        # Zellij has no per-pane border colours.
        return None

    async def set_pane_title(self, pane_id: str, name: str, color: str, is_external: bool = False) -> None:
        # Title comes from --name at creation.
        return None

    async def enable_pane_border_status(self, window_target: str | None = None, is_external: bool = False) -> None:
        return None

    async def rebalance_panes(self, target: str, is_external: bool = False) -> None:
        LOGGER.debug("rebalance_panes: no-op (Zellij lays panes out itself)")

    async def kill_pane(self, pane_id: str, is_external: bool = False) -> bool:
        """Best effort: ``close-pane`` only acts on the focused pane, so the
        teammate process is left to exit on its own."""

        LOGGER.debug("kill_pane %s: best-effort, process exits naturally", pane_id)
        return True

    async def hide_pane(self, pane_id: str, is_external: bool = False) -> bool:
        return False

    async def show_pane(self, pane_id: str, target: str, is_external: bool = False) -> bool:
        return False


__all__ = ["PaneCommandError", "TeammatePane", "ZellijBackend"]
