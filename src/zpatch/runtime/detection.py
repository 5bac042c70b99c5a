"""Zellij session and binary detection."""

from __future__ import annotations

import os
from typing import Mapping

from .process import DEFAULT_COMMAND_TIMEOUT, CommandTimeout, run_command


def is_inside_zellij(env: Mapping[str, str] | None = None) -> bool:
    """Zellij exports ``ZELLIJ=0`` and the session name inside its panes."""

    environ = os.environ if env is None else env
    return environ.get("ZELLIJ") == "0" and bool(environ.get("ZELLIJ_SESSION_NAME"))


async def is_zellij_available(*, timeout: float = DEFAULT_COMMAND_TIMEOUT) -> bool:
    """Return ``True`` when a ``zellij`` binary is on ``PATH``."""

    try:
        result = await run_command("which", ["zellij"], timeout=timeout)
    except (OSError, CommandTimeout):
        return False
    return result.ok


def leader_pane_id(env: Mapping[str, str] | None = None) -> str | None:
    environ = os.environ if env is None else env
    return environ.get("ZELLIJ_PANE_ID") or None


__all__ = ["is_inside_zellij", "is_zellij_available", "leader_pane_id"]
