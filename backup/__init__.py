"""Snapshot and restore files touched by pnpm catalog rewrites."""
from __future__ import annotations

from .api import BackupService
from .create import create_backup
from .errors import BackupError, BackupNotFoundError, BackupPathError
from .index import get_backup_info, get_latest_backup, has_backup, list_backups
from .manifest import SnapshotManifest, format_backup_time
from .restore import RESTORE_NOT_FOUND, restore_backup, restore_report
from .retention import clear_backups, delete_backup, prune_backups
from .types import BackupInfo, RestoreReport, RetentionSummary
from .workspace import collect_workspace_files

__all__ = [
    "BackupError",
    "BackupInfo",
    "BackupNotFoundError",
    "BackupPathError",
    "BackupService",
    "RESTORE_NOT_FOUND",
    "RestoreReport",
    "RetentionSummary",
    "SnapshotManifest",
    "clear_backups",
    "collect_workspace_files",
    "create_backup",
    "delete_backup",
    "format_backup_time",
    "get_backup_info",
    "get_latest_backup",
    "has_backup",
    "list_backups",
    "prune_backups",
    "restore_backup",
    "restore_report",
]
