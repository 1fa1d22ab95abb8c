"""Delete snapshots one at a time, all at once, or beyond a keep count."""
from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Any, List, Optional

from core.paths import get_backup_dir

from .ids import is_safe_backup_id
from .index import list_backups
from .logs import BackupLogger
from .types import RetentionSummary


def _ignore_missing(func: Any, path: str, exc: BaseException) -> None:
    if isinstance(exc, FileNotFoundError):
        return
    raise exc


def _remove_tree(path: Path) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_ignore_missing)
    else:
        shutil.rmtree(path, onerror=lambda func, failed, info: _ignore_missing(func, failed, info[1]))


def delete_backup(working_dir: Path, backup_id: str, *, logger: Optional[BackupLogger] = None) -> bool:
    """Remove the snapshot directory for *backup_id*.

    Returns False when it does not exist. Entries that disappear while the
    tree is being removed are ignored; any other ``OSError`` propagates.
    """

    if not is_safe_backup_id(backup_id):
        return False
    backup_dir = get_backup_dir(working_dir, backup_id)
    if not backup_dir.is_dir():
        return False
    _remove_tree(backup_dir)
    (logger or BackupLogger(working_dir)).event(event="backup_deleted", phase="retention", ok=True, id=backup_id)
    return True


def clear_backups(working_dir: Path, *, logger: Optional[BackupLogger] = None) -> int:
    """Delete every snapshot listed at call time and return how many went.

    Nothing is logged when there was nothing to delete.
    """

    logger = logger or BackupLogger(working_dir)
    deleted = 0
    for info in list_backups(working_dir, logger=logger):
        if delete_backup(working_dir, info.backup_id, logger=logger):
            deleted += 1
    if deleted:
        logger.event(event="backups_cleared", phase="retention", ok=True, removed=deleted)
    return deleted


def prune_backups(
    working_dir: Path,
    keep_last: int,
    *,
    logger: Optional[BackupLogger] = None,
) -> RetentionSummary:
    """Keep the *keep_last* most recent snapshots and delete the rest.

    ``keep_last <= 0`` disables pruning.
    """

    logger = logger or BackupLogger(working_dir)
    items = list_backups(working_dir, logger=logger)
    if keep_last <= 0:
        return RetentionSummary(removed=[], kept=[info.backup_id for info in items])

    removed: List[str] = []
    for info in items[keep_last:]:
        if delete_backup(working_dir, info.backup_id, logger=logger):
            removed.append(info.backup_id)
            logger.warning("backup_removed", id=info.backup_id, reason="retention")

    kept = [info.backup_id for info in items if info.backup_id not in removed]
    if removed:
        logger.event(event="retention_applied", phase="retention", ok=True, removed=len(removed), kept=len(kept))
    return RetentionSummary(removed=removed, kept=kept)


__all__ = ["clear_backups", "delete_backup", "prune_backups"]
