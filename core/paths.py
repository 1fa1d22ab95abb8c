from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

__all__ = [
    "BACKUP_CACHE_DIR",
    "BACKUP_LOG_FILE",
    "BACKUP_MANIFEST_FILE",
    "PCC_CACHE_DIR",
    "SETTINGS_FILE",
    "WORKING_DIR_ENV",
    "get_backup_cache_dir",
    "get_backup_dir",
    "get_backup_log_path",
    "get_manifest_path",
    "get_settings_path",
    "resolve_working_dir",
]

WORKING_DIR_ENV = "PCC_CWD"
PCC_CACHE_DIR = Path("node_modules") / ".cache" / "pcc"
BACKUP_CACHE_DIR = PCC_CACHE_DIR / "backups"
BACKUP_MANIFEST_FILE = "manifest.json"
BACKUP_LOG_FILE = PCC_CACHE_DIR / "backup.jsonl"
SETTINGS_FILE = Path(".pcc") / "settings.json"


def _expand_path(value: str | os.PathLike[str]) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(str(value)))
    return Path(expanded).resolve()


def resolve_working_dir(cwd: Optional[str | os.PathLike[str]] = None) -> Path:
    """Resolve the project directory all backup paths are relative to.

    An explicit *cwd* wins, then the ``PCC_CWD`` environment variable, then
    the process working directory. The directory is not created.
    """

    if cwd:
        return _expand_path(cwd)
    env_home = os.environ.get(WORKING_DIR_ENV)
    if env_home and env_home.strip():
        return _expand_path(env_home.strip())
    return Path.cwd().resolve()


def get_backup_cache_dir(working_dir: Path) -> Path:
    return Path(working_dir) / BACKUP_CACHE_DIR


def get_backup_dir(working_dir: Path, backup_id: str) -> Path:
    return get_backup_cache_dir(working_dir) / backup_id


def get_manifest_path(backup_dir: Path) -> Path:
    return Path(backup_dir) / BACKUP_MANIFEST_FILE


def get_backup_log_path(working_dir: Path) -> Path:
    return Path(working_dir) / BACKUP_LOG_FILE


def get_settings_path(working_dir: Path) -> Path:
    return Path(working_dir) / SETTINGS_FILE
