"""Python counterpart of the injected Zellij pane backend."""

from .backend import PaneCommandError, TeammatePane, ZellijBackend
from .detection import is_inside_zellij, is_zellij_available, leader_pane_id
from .lock import FifoLock
from .process import CommandResult, CommandTimeout, run_command

__all__ = [
    "CommandResult",
    "CommandTimeout",
    "FifoLock",
    "PaneCommandError",
    "TeammatePane",
    "ZellijBackend",
    "is_inside_zellij",
    "is_zellij_available",
    "leader_pane_id",
    "run_command",
]
