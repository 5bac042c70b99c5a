"""Named, independently attempted text edits against the CLI bundle.

Each :class:`Edit` pairs an anchor predicate with a transform. The pipeline
runs them in a fixed order; a failed edit leaves the text untouched and the
next edit sees whatever the successful ones produced.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Sequence

from . import anchors
from .errors import AnchorNotFound
from .extract import IdentifierBundle
from .generate import REGISTRATION_MARKER, GeneratedFragments, find_name_collisions
from .report import EditFailure, StepOutcome

LOGGER = logging.getLogger(__name__)

DEFAULT_LOOKBACK_WINDOW = 200

# Start of the statement that evaluates the external tmux probe and logs it:
# ``let K=await Ts();if(h(`` followed directly by the cascade message.
_CASCADE_STATEMENT_RE = re.compile(r"(?<![\w$])let\s+[\w$]+=await\s*[\w$]+\(\);if\([\w$]+\([`\"']\Z")


@dataclass(slots=True, frozen=True)
class Edit:
    """Single gated transformation."""

    label: str
    anchor: Callable[[str], bool]
    transform: Callable[[str], str]
    missing_reason: str

    def run(self, text: str) -> StepOutcome:
        if not self.anchor(text):
            LOGGER.debug("Edit %r skipped: %s", self.label, self.missing_reason)
            return StepOutcome(text=text, failures=(EditFailure(self.label, self.missing_reason),))
        try:
            updated = self.transform(text)
        except AnchorNotFound as error:
            LOGGER.debug("Edit %r failed: %s", self.label, error)
            return StepOutcome(text=text, failures=(EditFailure(self.label, str(error), kind=error.kind),))
        return StepOutcome(text=updated, applied=(self.label,))


@dataclass(slots=True, frozen=True)
class MessageReplacements:
    """Best-effort literal swaps; an absent literal is a warning, never a failure."""

    pairs: tuple[tuple[str, str], ...] = anchors.MESSAGE_REPLACEMENTS

    def run(self, text: str) -> StepOutcome:
        applied: list[str] = []
        warnings: list[str] = []
        for find, replace in self.pairs:
            preview = f"{find[:40]}..."
            if find in text:
                text = text.replace(find, replace)
                applied.append(f'Updated message: "{preview}"')
            else:
                warnings.append(f'Message not found (may already be patched): "{preview}"')
        return StepOutcome(text=text, applied=tuple(applied), warnings=tuple(warnings))


def _insert_before(text: str, anchor: str, fragment: str) -> str:
    index = text.index(anchor)
    return text[:index] + fragment + text[index:]


def capability_injection(bundle: IdentifierBundle, fragments: GeneratedFragments) -> Edit:
    anchor = f"class {bundle.backend_class}{anchors.TMUX_CLASS_TAG}"

    def present(text: str) -> bool:
        index = text.find(anchor)
        return index >= 0 and not text[:index].rstrip().endswith(REGISTRATION_MARKER)

    def transform(text: str) -> str:
        collisions = find_name_collisions(text)
        if collisions:
            raise AnchorNotFound(
                "Generated name(s) already in use: " + ", ".join(collisions),
                kind="name-collision",
            )
        return _insert_before(text, anchor, fragments.capability)

    return Edit(
        label="Injected Zellij backend class and detection functions",
        anchor=present,
        transform=transform,
        missing_reason=f"Could not find tmux backend class anchor ({anchor})",
    )


def cascade_insertion(fragments: GeneratedFragments, *, lookback_window: int = DEFAULT_LOOKBACK_WINDOW) -> Edit:
    def transform(text: str) -> str:
        index = text.index(anchors.CASCADE_MESSAGE)
        start = max(0, index - lookback_window)
        match = _CASCADE_STATEMENT_RE.search(text, start, index)
        if match is None:
            raise AnchorNotFound(
                f"Found cascade message but no enclosing statement start within {lookback_window} characters",
                kind="statement-start-not-found",
            )
        position = match.start()
        return text[:position] + fragments.cascade_branch + text[position:]

    return Edit(
        label="Inserted Zellij detection in backend cascade",
        anchor=lambda text: anchors.CASCADE_MESSAGE in text,
        transform=transform,
        missing_reason="Could not find cascade anchor for Zellij detection",
    )


def fallback_insertion(bundle: IdentifierBundle, fragments: GeneratedFragments) -> Edit:
    anchor = f'throw {bundle.logger}("{anchors.NO_BACKEND_MESSAGE}")'
    return Edit(
        label="Added Zellij as external fallback before error",
        anchor=lambda text: anchor in text,
        transform=lambda text: _insert_before(text, anchor, fragments.fallback_branch),
        missing_reason="Could not find error anchor for Zellij fallback",
    )


def dispatch_extension(bundle: IdentifierBundle, fragments: GeneratedFragments) -> Edit:
    anchor = f'case"tmux":return {bundle.tmux_factory}();case"iterm2":return {bundle.iterm2_factory}()'
    return Edit(
        label='Added "zellij" case to getBackendByType',
        anchor=lambda text: anchor in text,
        transform=lambda text: text.replace(anchor, anchor + fragments.dispatch_case, 1),
        missing_reason="Could not find getBackendByType anchor",
    )


def in_process_correction(bundle: IdentifierBundle, fragments: GeneratedFragments) -> Edit:
    message = re.escape(anchors.IN_PROCESS_MESSAGE)
    # The log call is either ``LOG("msg"+name)`` or ``LOG(`msg${name}`)``.
    pattern = re.compile(
        r"(?P<lead>(?:\blet|\bconst|\bvar)\s+|,)(?P<name>[\w$]+)=(?P<expr>[^;,{}]+);if\("
        + re.escape(bundle.logger)
        + r"\((?:[\"']"
        + message
        + r"[\"']\+(?P=name)|`"
        + message
        + r"\$\{(?P=name)\}`)\)"
    )

    def transform(text: str) -> str:
        match = pattern.search(text)
        if match is None:
            raise AnchorNotFound(
                "Found in-process message but not the condition assigned before it",
                kind="statement-start-not-found",
            )
        expr = match.group("expr")
        start, end = match.span("expr")
        return text[:start] + f"({expr}){fragments.in_process_conjunct}" + text[end:]

    return Edit(
        label="Excluded Zellij sessions from in-process teammate mode",
        anchor=lambda text: anchors.IN_PROCESS_MESSAGE in text,
        transform=transform,
        missing_reason="Could not find in-process teammate mode anchor",
    )


def build_steps(
    bundle: IdentifierBundle,
    fragments: GeneratedFragments,
    *,
    lookback_window: int = DEFAULT_LOOKBACK_WINDOW,
) -> Sequence[Edit | MessageReplacements]:
    """Return the pipeline steps in their fixed execution order."""

    return (
        capability_injection(bundle, fragments),
        cascade_insertion(fragments, lookback_window=lookback_window),
        fallback_insertion(bundle, fragments),
        dispatch_extension(bundle, fragments),
        MessageReplacements(),
        in_process_correction(bundle, fragments),
    )


__all__ = [
    "DEFAULT_LOOKBACK_WINDOW",
    "Edit",
    "MessageReplacements",
    "build_steps",
    "capability_injection",
    "cascade_insertion",
    "dispatch_extension",
    "fallback_insertion",
    "in_process_correction",
]
