"""Snapshot identifiers derived from the local wall clock."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from .errors import BackupError

ID_FORMAT = "%Y%m%d_%H%M%S"
MAX_SUFFIX = 99


def generate_backup_id(now: Optional[datetime] = None) -> str:
    """Return ``YYYYMMDD_HHMMSS`` for *now* in local time.

    Identifiers sort lexicographically in chronological order at one second
    resolution. Two calls within the same second return the same value; the
    store resolves that with :func:`suffixed_backup_id`.
    """

    if now is None:
        now = datetime.now()
    elif now.tzinfo is not None:
        now = now.astimezone()
    return now.strftime(ID_FORMAT)


def suffixed_backup_id(base_id: str, attempt: int) -> str:
    """Return the *attempt*-th candidate name for *base_id*.

    ``20240101_120000`` < ``20240101_120000_01`` < ``20240101_120001``, so
    suffixed names keep the chronological sort.
    """

    if attempt < 0 or attempt > MAX_SUFFIX:
        raise BackupError(f"No free backup id left for {base_id}")
    if attempt == 0:
        return base_id
    return f"{base_id}_{attempt:02d}"


def is_safe_backup_id(value: object) -> bool:
    """Return True if *value* can name a directory directly under the store."""

    if not isinstance(value, str) or not value:
        return False
    if value in {".", ".."}:
        return False
    return not any(char in value for char in ("/", "\\", "\x00"))


__all__ = ["MAX_SUFFIX", "generate_backup_id", "is_safe_backup_id", "suffixed_backup_id"]
