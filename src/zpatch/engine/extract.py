"""Recover the bundle's minified identifier names from stable anchors."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from typing import Pattern, Sequence

from . import anchors
from .errors import ExtractionFailed

LOGGER = logging.getLogger(__name__)

_IDENT = r"[\w$]+"


@dataclass(slots=True, frozen=True)
class IdentifierBundle:
    """Minified names of the host primitives the generated code must call."""

    backend_class: str
    tmux_factory: str
    iterm2_factory: str
    logger: str
    exec_helper: str
    backend_cache: str
    selection_cache: str

    def to_dict(self) -> dict[str, str]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(slots=True, frozen=True)
class IdentifierRule:
    """Anchor literal plus the positional capture that resolves ``roles``.

    Every role must be the name of a group in ``pattern``.
    """

    roles: tuple[str, ...]
    anchor: str
    pattern: Pattern[str]

    def resolve(self, text: str) -> dict[str, str]:
        if self.anchor not in text:
            raise LookupError(f"anchor {self.anchor!r} not present")
        match = self.pattern.search(text)
        if match is None:
            raise LookupError(f"anchor {self.anchor!r} present but surrounding code has an unexpected shape")
        return {role: match.group(role) for role in self.roles}


IDENTIFIER_RULES: tuple[IdentifierRule, ...] = (
    IdentifierRule(
        roles=("backend_class",),
        anchor=anchors.TMUX_CLASS_TAG,
        pattern=re.compile(rf"class (?P<backend_class>{_IDENT})" + re.escape(anchors.TMUX_CLASS_TAG)),
    ),
    IdentifierRule(
        roles=("tmux_factory", "iterm2_factory"),
        anchor=anchors.DISPATCH_TAG,
        pattern=re.compile(
            rf'case"tmux":return (?P<tmux_factory>{_IDENT})\(\);case"iterm2":return (?P<iterm2_factory>{_IDENT})\(\)'
        ),
    ),
    IdentifierRule(
        roles=("logger",),
        anchor=f'"{anchors.NO_BACKEND_MESSAGE}"',
        pattern=re.compile(rf"(?<![\w$.])(?P<logger>{_IDENT})\(" + re.escape(f'"{anchors.NO_BACKEND_MESSAGE}"')),
    ),
    IdentifierRule(
        roles=("exec_helper",),
        anchor=anchors.TMUX_VERSION_PROBE,
        pattern=re.compile(rf"await (?P<exec_helper>{_IDENT})" + re.escape(anchors.TMUX_VERSION_PROBE)),
    ),
    IdentifierRule(
        roles=("backend_cache", "selection_cache"),
        anchor=anchors.SELECTION_TAG,
        pattern=re.compile(
            rf"return (?P<backend_cache>{_IDENT})=(?P<instance>{_IDENT}),(?P<selection_cache>{_IDENT})="
            rf"\{{backend:(?P=instance),isNative:(?:!0|!1|true|false),"
            + re.escape(anchors.SELECTION_TAG)
        ),
    ),
)


def extract_identifiers(
    text: str,
    rules: Sequence[IdentifierRule] = IDENTIFIER_RULES,
) -> IdentifierBundle:
    """Resolve every identifier role or raise :class:`ExtractionFailed`.

    Rules are evaluated independently so the failure lists every unresolved
    role, but a bundle is only ever built when all of them matched.
    """

    resolved: dict[str, str] = {}
    missing: dict[str, str] = {}
    for rule in rules:
        try:
            resolved.update(rule.resolve(text))
        except LookupError as error:
            for role in rule.roles:
                missing[role] = str(error)

    if missing:
        LOGGER.debug("Identifier extraction failed for roles: %s", ", ".join(missing))
        summary = "; ".join(f"{role}: {reason}" for role, reason in missing.items())
        raise ExtractionFailed(f"Could not resolve identifiers ({summary})", missing=missing)

    bundle = IdentifierBundle(**resolved)
    LOGGER.debug("Resolved identifiers: %s", bundle.to_dict())
    return bundle


__all__ = ["IDENTIFIER_RULES", "IdentifierBundle", "IdentifierRule", "extract_identifiers"]
