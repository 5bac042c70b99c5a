"""Single whole-file backup beside the patched target."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_BACKUP_SUFFIX = ".bak"


class BackupNotFound(FileNotFoundError):
    """Raised when restoring a target that has no backup."""


def backup_path_for(target: Path, suffix: str = DEFAULT_BACKUP_SUFFIX) -> Path:
    return target.with_name(target.name + suffix)


def ensure_backup(target: Path, suffix: str = DEFAULT_BACKUP_SUFFIX) -> tuple[Path, bool]:
    """Copy ``target`` to its backup path unless a backup already exists.

    Returns the backup path and whether it was created by this call. An
    existing backup is never overwritten so it keeps the pristine original.
    """

    backup = backup_path_for(target, suffix)
    if backup.exists():
        return backup, False
    shutil.copy2(target, backup)
    LOGGER.info("Backup created: %s", backup)
    return backup, True


def write_patched(target: Path, content: str, suffix: str = DEFAULT_BACKUP_SUFFIX) -> tuple[Path, bool]:
    """Back up ``target`` (once) and overwrite it with ``content``.

    Written as raw UTF-8 bytes so line endings are kept exactly as given.
    """

    backup, created = ensure_backup(target, suffix)
    target.write_bytes(content.encode("utf-8"))
    return backup, created


def restore_backup(target: Path, suffix: str = DEFAULT_BACKUP_SUFFIX) -> Path:
    """Copy the backup over ``target``; the backup itself is kept."""

    backup = backup_path_for(target, suffix)
    if not backup.is_file():
        raise BackupNotFound(f"No backup found at {backup}")
    shutil.copyfile(backup, target)
    LOGGER.info("Restored %s from %s", target, backup)
    return backup


__all__ = ["BackupNotFound", "DEFAULT_BACKUP_SUFFIX", "backup_path_for", "ensure_backup", "restore_backup", "write_patched"]
