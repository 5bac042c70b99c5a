"""Filesystem collaborators: target discovery and backups."""

from .backup import BackupNotFound, backup_path_for, ensure_backup, restore_backup, write_patched
from .locator import candidate_paths, find_target, is_native_binary

__all__ = [
    "BackupNotFound",
    "backup_path_for",
    "candidate_paths",
    "ensure_backup",
    "find_target",
    "is_native_binary",
    "restore_backup",
    "write_patched",
]
