"""Pre-flight checks that run before any identifier extraction."""

from __future__ import annotations

from . import anchors
from .errors import AlreadyPatched, NotRecognized


def is_already_patched(text: str) -> bool:
    """Return ``True`` when ``text`` already carries the Zellij backend."""

    return any(token in text for token in anchors.SIGNATURE_TOKENS)


def is_recognized(text: str) -> bool:
    """Return ``True`` when ``text`` looks like the agent CLI bundle."""

    return all(marker in text for marker in anchors.RECOGNITION_MARKERS)


def ensure_patchable(text: str) -> None:
    """Raise unless ``text`` is an unpatched, recognised bundle.

    The already-patched check wins over recognition so a patched file is
    never reported as foreign.
    """

    if is_already_patched(text):
        found = [token for token in anchors.SIGNATURE_TOKENS if token in text]
        raise AlreadyPatched(
            "File appears to already be patched with Zellij support",
            details={"signatures": found},
        )
    if not is_recognized(text):
        missing = [marker for marker in anchors.RECOGNITION_MARKERS if marker not in text]
        raise NotRecognized(
            "File does not appear to be the agent CLI bundle (cli.js)",
            details={"missing_markers": missing},
        )


__all__ = ["ensure_patchable", "is_already_patched", "is_recognized"]
