"""Locate the installed agent CLI bundle."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

LOGGER = logging.getLogger(__name__)

PACKAGE_SUFFIX = Path("node_modules") / "@anthropic-ai" / "claude-code" / "cli.js"
_ELF_MAGIC = b"\x7fELF"


def _home(env: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if env is None else env
    value = environ.get("HOME") or environ.get("USERPROFILE")
    return Path(value) if value else Path.home()


def _version_key(path: Path) -> tuple[int, ...]:
    """Order ``v22.3.0`` after ``v9.11.2`` by comparing numeric components."""
    return tuple(int(part) for part in re.findall(r"\d+", path.name))


def _children(directory: Path, *, newest_first: bool = False) -> List[Path]:
    try:
        if newest_first:
            entries = sorted(directory.iterdir(), key=_version_key, reverse=True)
        else:
            entries = sorted(directory.iterdir())
    except OSError:
        return []
    return [entry for entry in entries if entry.is_dir()]


def candidate_paths(home: Path, extra: Sequence[Path | str] = ()) -> List[Path]:
    """Return every location checked, in priority order."""

    candidates: List[Path] = [Path(item).expanduser() for item in extra]
    candidates.extend(
        [
            Path("/home/linuxbrew/.linuxbrew/lib") / PACKAGE_SUFFIX,
            Path("/opt/homebrew/lib") / PACKAGE_SUFFIX,
            Path("/usr/local/lib") / PACKAGE_SUFFIX,
        ]
    )
    for version in _children(home / ".nvm" / "versions" / "node", newest_first=True):
        candidates.append(version / "lib" / PACKAGE_SUFFIX)
    candidates.extend(
        [
            Path("/usr/lib") / PACKAGE_SUFFIX,
            home / ".npm-global" / "lib" / PACKAGE_SUFFIX,
            home / PACKAGE_SUFFIX,
        ]
    )
    for entry in _children(home / ".npm" / "_npx"):
        candidates.append(entry / PACKAGE_SUFFIX)
    return candidates


def is_native_binary(path: Path) -> bool:
    """Return ``True`` for ELF executables, which cannot be text-patched."""

    with path.open("rb") as handle:
        return handle.read(4) == _ELF_MAGIC


def first_patchable(candidates: Iterable[Path]) -> Path | None:
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            if is_native_binary(candidate):
                LOGGER.debug("Skipping native binary at %s", candidate)
                continue
        except OSError as error:
            LOGGER.debug("Skipping unreadable candidate %s: %s", candidate, error)
            continue
        return candidate
    return None


def find_target(extra: Sequence[Path | str] = (), *, home: Path | None = None) -> Path | None:
    """Return the first existing, text-based ``cli.js`` or ``None``."""

    return first_patchable(candidate_paths(home or _home(), extra))


__all__ = ["candidate_paths", "find_target", "first_patchable", "is_native_binary"]
