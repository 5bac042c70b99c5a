"""Failure types raised inside the patch engine.

None of these escape :func:`zpatch.engine.pipeline.patch_source`; the pipeline
folds each one into the :class:`~zpatch.engine.report.PatchReport` it returns.
"""

from __future__ import annotations

from typing import Any, Mapping


class PatchEngineError(RuntimeError):
    """Base class for patch engine failures."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class NotRecognized(PatchEngineError):
    """Raised when the input lacks the baseline markers of a patchable bundle."""


class AlreadyPatched(PatchEngineError):
    """Raised when the input already carries the injected capability."""


class ExtractionFailed(PatchEngineError):
    """Raised when one or more identifier roles could not be resolved."""

    def __init__(self, message: str, *, missing: Mapping[str, str]) -> None:
        super().__init__(message, details={"missing": dict(missing)})
        self.missing: dict[str, str] = dict(missing)


class AnchorNotFound(PatchEngineError):
    """Raised by an edit whose insertion point could not be located."""

    def __init__(self, message: str, *, kind: str = "anchor-not-found") -> None:
        super().__init__(message, details={"kind": kind})
        self.kind = kind


__all__ = [
    "AlreadyPatched",
    "AnchorNotFound",
    "ExtractionFailed",
    "NotRecognized",
    "PatchEngineError",
]
