"""Literal landmarks inside the agent CLI bundle.

String literals survive minification, so every coordinate the engine relies on
is expressed here as plain text. Identifier names around them are recovered at
runtime by :mod:`zpatch.engine.extract`.
"""

from __future__ import annotations

# Both must be present before the file is treated as a patch target.
REGISTRY_TAG = "BackendRegistry"
TYPE_TAG = "TmuxBackend"
RECOGNITION_MARKERS: tuple[str, ...] = (REGISTRY_TAG, TYPE_TAG)

# Any of these means the Zellij backend has already been spliced in.
SIGNATURE_TOKENS: tuple[str, ...] = ("ZellijBackendImpl", "isInsideZellijSync")

TMUX_CLASS_TAG = '{type="tmux"'
DISPATCH_TAG = 'case"tmux":return '
NO_BACKEND_MESSAGE = "[BackendRegistry] ERROR: No pane backend available"
TMUX_VERSION_PROBE = '("tmux",["-V"])'
SELECTION_TAG = "needsIt2Setup:"
CASCADE_MESSAGE = "[BackendRegistry] Not in tmux or iTerm2, tmux available: "
IN_PROCESS_MESSAGE = "[TeammateSpawn] Using in-process teammates: "

MESSAGE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    (
        "To use agent swarms, install tmux:",
        "To use agent swarms, install tmux or start a Zellij session (zellij):",
    ),
    (
        "To use agent swarms, install tmux using your system's package manager.",
        "To use agent swarms, install tmux or Zellij using your system's package manager.",
    ),
    (
        "Agent teams require tmux or iTerm2.",
        "Agent teams require tmux, iTerm2, or Zellij.",
    ),
    (
        "No pane backend available (tmux or iTerm2 required)",
        "No pane backend available (tmux, iTerm2, or Zellij required)",
    ),
    (
        "Install tmux with: brew install tmux",
        "Install tmux with: brew install tmux (or Zellij with: brew install zellij)",
    ),
)
