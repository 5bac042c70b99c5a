"""Structured outcome of a single patch run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PatchStatus(str, Enum):
    """Terminal classification of a patch run."""

    OK = "ok"
    ALREADY_PATCHED = "already-patched"
    NOT_RECOGNIZED = "not-recognized"
    EXTRACTION_FAILED = "extraction-failed"
    EDITS_FAILED = "edits-failed"


@dataclass(slots=True, frozen=True)
class EditFailure:
    """Named edit that could not be applied."""

    label: str
    reason: str
    kind: str = "anchor-not-found"

    def __str__(self) -> str:
        return f"{self.label}: {self.reason}"

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "reason": self.reason, "kind": self.kind}


@dataclass(slots=True, frozen=True)
class StepOutcome:
    """Result of one pipeline step; ``text`` is unchanged when the step failed."""

    text: str
    applied: tuple[str, ...] = ()
    failures: tuple[EditFailure, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class PatchReport:
    """Outcome of a patch run.

    ``patched_text`` is populated only when no edit failed; warnings never
    affect success.
    """

    status: PatchStatus
    applied: tuple[str, ...] = ()
    failures: tuple[EditFailure, ...] = ()
    warnings: tuple[str, ...] = ()
    patched_text: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if (self.patched_text is not None) != (not self.failures):
            raise ValueError("patched_text must be present exactly when no edit failed")
        if (self.status is PatchStatus.OK) != (not self.failures):
            raise ValueError(f"status {self.status.value!r} is inconsistent with failures")

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def failed_labels(self) -> tuple[str, ...]:
        return tuple(failure.label for failure in self.failures)

    @classmethod
    def fatal(cls, status: PatchStatus, reason: str) -> "PatchReport":
        """Build a report for a run that stopped before any edit was attempted."""

        return cls(status=status, failures=(EditFailure(label="preflight", reason=reason, kind=status.value),))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "success": self.success,
            "applied": list(self.applied),
            "failures": [failure.to_dict() for failure in self.failures],
            "warnings": list(self.warnings),
        }


__all__ = ["EditFailure", "PatchReport", "PatchStatus", "StepOutcome"]
