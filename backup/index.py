"""Enumerate and look up stored snapshots."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from core.paths import get_backup_cache_dir, get_backup_dir, get_manifest_path

from .ids import is_safe_backup_id
from .logs import BackupLogger
from .manifest import read_manifest
from .types import BackupInfo


def _reader(working_dir: Path, logger: Optional[BackupLogger]) -> BackupLogger:
    return logger or BackupLogger(working_dir, persist=False)


def _load_info(backup_dir: Path, *, logger: BackupLogger) -> Optional[BackupInfo]:
    manifest_path = get_manifest_path(backup_dir)
    if not manifest_path.is_file():
        logger.warning("backup_skipped", id=backup_dir.name, reason="manifest_missing")
        return None
    try:
        manifest = read_manifest(manifest_path)
    except (OSError, ValueError) as exc:
        logger.warning("backup_skipped", id=backup_dir.name, reason="manifest_invalid", error=str(exc))
        return None
    if manifest.id != backup_dir.name:
        logger.warning("backup_skipped", id=backup_dir.name, reason="id_mismatch", manifest_id=manifest.id)
        return None
    return BackupInfo(path=backup_dir, manifest=manifest)


def list_backups(working_dir: Path, *, logger: Optional[BackupLogger] = None) -> List[BackupInfo]:
    """Return valid snapshots, most recent manifest timestamp first."""

    logger = _reader(working_dir, logger)
    base = get_backup_cache_dir(working_dir)
    if not base.is_dir():
        return []
    try:
        children = sorted(base.iterdir(), key=lambda child: child.name)
    except FileNotFoundError:
        return []

    items: List[BackupInfo] = []
    for child in children:
        if not child.is_dir():
            continue
        info = _load_info(child, logger=logger)
        if info is not None:
            items.append(info)
    items.sort(key=lambda info: info.created, reverse=True)
    return items


def get_backup_info(
    working_dir: Path,
    backup_id: str,
    *,
    logger: Optional[BackupLogger] = None,
) -> Optional[BackupInfo]:
    if not is_safe_backup_id(backup_id):
        return None
    backup_dir = get_backup_dir(working_dir, backup_id)
    if not backup_dir.is_dir():
        return None
    return _load_info(backup_dir, logger=_reader(working_dir, logger))


def get_latest_backup(working_dir: Path, *, logger: Optional[BackupLogger] = None) -> Optional[BackupInfo]:
    backups = list_backups(working_dir, logger=logger)
    return backups[0] if backups else None


def has_backup(working_dir: Path) -> bool:
    return bool(list_backups(working_dir))


__all__ = ["get_backup_info", "get_latest_backup", "has_backup", "list_backups"]
