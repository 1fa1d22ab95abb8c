"""Public API for backup operations."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from core.paths import resolve_working_dir
from core.settings import backup_settings, load_settings

from .create import create_backup
from .errors import BackupError, BackupNotFoundError
from .index import get_backup_info, get_latest_backup, list_backups
from .logs import BackupLogger
from .restore import restore_report
from .retention import clear_backups, delete_backup, prune_backups
from .types import BackupInfo, RestoreReport, RetentionSummary


class BackupService:
    """Bind the backup operations to one working directory and its settings."""

    def __init__(
        self,
        *,
        working_dir: Optional[os.PathLike[str] | str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._working_dir = resolve_working_dir(working_dir)
        self._settings = dict(settings) if settings is not None else load_settings(self._working_dir)
        self._logger = BackupLogger(self._working_dir)

    # ------------------------------------------------------------------
    @property
    def working_dir(self) -> Path:
        return self._working_dir

    @property
    def settings(self) -> Dict[str, Any]:
        return self._settings

    @property
    def options(self) -> Dict[str, Any]:
        return backup_settings(self._settings)

    # ------------------------------------------------------------------
    def create_snapshot(self, file_paths: Iterable[os.PathLike[str] | str], description: str = "") -> str:
        backup_id = create_backup(self._working_dir, file_paths, description, logger=self._logger)
        keep_last = self.options["keep_last"]
        if keep_last > 0:
            prune_backups(self._working_dir, keep_last, logger=self._logger)
        return backup_id

    # ------------------------------------------------------------------
    def list_backups(self) -> List[BackupInfo]:
        return list_backups(self._working_dir)

    def get_backup(self, backup_id: Optional[str] = None) -> Optional[BackupInfo]:
        """Return *backup_id*, or the latest snapshot when no id is given."""

        if backup_id:
            return get_backup_info(self._working_dir, backup_id)
        return get_latest_backup(self._working_dir)

    def require_backup(self, backup_id: Optional[str] = None) -> BackupInfo:
        info = self.get_backup(backup_id)
        if info is None:
            raise BackupNotFoundError(f"Backup {backup_id} not found" if backup_id else "No backups found")
        return info

    def has_backup(self) -> bool:
        return bool(self.list_backups())

    # ------------------------------------------------------------------
    def restore_snapshot(
        self,
        backup_id: Optional[str] = None,
        *,
        target_dir: Optional[Path] = None,
    ) -> Optional[RestoreReport]:
        return restore_report(self._working_dir, backup_id, target_dir=target_dir, logger=self._logger)

    # ------------------------------------------------------------------
    def delete_snapshot(self, backup_id: str) -> bool:
        return delete_backup(self._working_dir, backup_id, logger=self._logger)

    def clear(self) -> int:
        return clear_backups(self._working_dir, logger=self._logger)

    def prune(self, keep_last: Optional[int] = None) -> RetentionSummary:
        if keep_last is None:
            keep_last = self.options["keep_last"]
        return prune_backups(self._working_dir, keep_last, logger=self._logger)


__all__ = [
    "BackupError",
    "BackupNotFoundError",
    "BackupService",
]
