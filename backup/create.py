"""Create backup snapshots of files about to be rewritten."""
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from core.paths import get_backup_cache_dir, get_manifest_path
from core.versioning import get_app_version

from .errors import BackupError, BackupPathError
from .ids import MAX_SUFFIX, generate_backup_id, suffixed_backup_id
from .logs import BackupLogger
from .manifest import ManifestFile, SnapshotManifest, utcnow, write_manifest


def _absolute(path: os.PathLike[str] | str) -> Path:
    return Path(os.path.abspath(path))


def _resolve_source(working_dir: Path, raw: os.PathLike[str] | str) -> Tuple[Path, str]:
    candidate = Path(raw)
    if not candidate.is_absolute():
        candidate = working_dir / candidate
    source = _absolute(candidate)
    try:
        relative = source.relative_to(working_dir)
    except ValueError:
        # Symlinked temp or home directories can hide a match.
        try:
            relative = source.resolve().relative_to(working_dir.resolve())
        except ValueError as exc:
            raise BackupPathError(f"{raw} is outside the working directory {working_dir}") from exc
    if not relative.parts:
        raise BackupPathError(f"{raw} is the working directory itself, not a file")
    return source, relative.as_posix()


def _claim_backup_dir(cache_dir: Path, base_id: str) -> Tuple[str, Path]:
    cache_dir.mkdir(parents=True, exist_ok=True)
    for attempt in range(MAX_SUFFIX + 1):
        backup_id = suffixed_backup_id(base_id, attempt)
        candidate = cache_dir / backup_id
        try:
            candidate.mkdir()
        except FileExistsError:
            continue
        return backup_id, candidate
    raise BackupError(f"Too many backups created at {base_id}")


def _copy_file(source: Path, dest: Path, *, relative: str, logger: BackupLogger) -> bool:
    if not source.is_file():
        logger.info("capture_skipped", path=relative, reason="missing")
        return False
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)
    shutil.copystat(source, dest)
    logger.info("capture_file", path=relative, size=dest.stat().st_size)
    return True


def create_backup(
    working_dir: Path,
    file_paths: Iterable[os.PathLike[str] | str],
    description: str = "",
    *,
    logger: Optional[BackupLogger] = None,
) -> str:
    """Snapshot *file_paths* and return the new backup id.

    Paths may be absolute or relative to *working_dir* and must lie inside it.
    Files that do not exist are skipped and left out of the manifest. The
    manifest is written last, so an interrupted snapshot has none and is
    ignored by the index.
    """

    working_dir = _absolute(working_dir)
    logger = logger or BackupLogger(working_dir)
    sources = [_resolve_source(working_dir, raw) for raw in file_paths]

    backup_id, backup_dir = _claim_backup_dir(get_backup_cache_dir(working_dir), generate_backup_id())
    logger.event(event="backup_start", phase="create", ok=True, id=backup_id, requested=len(sources))

    files: List[ManifestFile] = []
    for source, relative in sources:
        if _copy_file(source, backup_dir / relative, relative=relative, logger=logger):
            files.append(ManifestFile(relative_path=relative))

    manifest = SnapshotManifest(
        id=backup_id,
        timestamp=utcnow(),
        version=get_app_version(),
        description=description or "",
        files=files,
    )
    write_manifest(get_manifest_path(backup_dir), manifest)

    logger.event(event="backup_complete", phase="create", ok=True, id=backup_id, files=len(files))
    return backup_id


__all__ = ["create_backup"]
