"""Error hierarchy for backup operations."""
from __future__ import annotations


class BackupError(RuntimeError):
    """Base exception for backup related failures."""


class BackupPathError(BackupError):
    """Raised when a file to capture lies outside the working directory."""


class BackupNotFoundError(BackupError):
    """Raised by strict lookups when no snapshot matches."""


__all__ = ["BackupError", "BackupNotFoundError", "BackupPathError"]
