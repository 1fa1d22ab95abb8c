"""Write captured files back to the working directory."""
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

from .index import get_backup_info, get_latest_backup
from .logs import BackupLogger
from .types import BackupInfo, RestoreReport

RESTORE_NOT_FOUND = -1


def _copy_to(target: Path, source: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    # copyfile refuses a directory at the target instead of copying into it.
    shutil.copyfile(source, target)
    shutil.copystat(source, target)


def _resolve(working_dir: Path, backup_id: Optional[str]) -> Optional[BackupInfo]:
    if backup_id:
        return get_backup_info(working_dir, backup_id)
    return get_latest_backup(working_dir)


def restore_report(
    working_dir: Path,
    backup_id: Optional[str] = None,
    *,
    target_dir: Optional[Path] = None,
    logger: Optional[BackupLogger] = None,
) -> Optional[RestoreReport]:
    """Restore *backup_id* (or the latest snapshot) and describe what happened.

    Returns ``None`` when no snapshot matches, before anything is written.
    Files missing from the snapshot are skipped. Files are copied in manifest
    order and an ``OSError`` aborts the loop without undoing earlier copies.
    *target_dir* redirects the restore away from *working_dir*.
    """

    working_dir = Path(os.path.abspath(working_dir))
    info = _resolve(working_dir, backup_id)
    if info is None:
        return None

    destination = Path(os.path.abspath(target_dir)) if target_dir is not None else working_dir
    logger = logger or BackupLogger(working_dir)
    report = RestoreReport(backup_id=info.backup_id)
    for entry in info.manifest.files:
        rel = entry.relative_path
        source = info.path / rel
        if not source.is_file():
            logger.warning("restore_skipped", id=info.backup_id, path=rel, reason="missing_in_snapshot")
            report.skipped.append(rel)
            continue
        logger.info("restore_copy", id=info.backup_id, path=rel)
        _copy_to(destination / rel, source)
        report.restored.append(rel)

    logger.event(
        event="backup_restored",
        phase="restore",
        ok=True,
        id=info.backup_id,
        restored=report.count,
        skipped=len(report.skipped),
    )
    return report


def restore_backup(
    working_dir: Path,
    backup_id: Optional[str] = None,
    *,
    target_dir: Optional[Path] = None,
    logger: Optional[BackupLogger] = None,
) -> int:
    """Return the number of files restored, or ``RESTORE_NOT_FOUND``."""

    report = restore_report(working_dir, backup_id, target_dir=target_dir, logger=logger)
    if report is None:
        return RESTORE_NOT_FOUND
    return report.count


__all__ = ["RESTORE_NOT_FOUND", "restore_backup", "restore_report"]
