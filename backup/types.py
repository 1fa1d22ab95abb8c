"""Common dataclasses shared across backup modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from .manifest import SnapshotManifest


@dataclass(slots=True)
class BackupInfo:
    """A snapshot directory together with its validated manifest."""

    path: Path
    manifest: SnapshotManifest

    @property
    def backup_id(self) -> str:
        return self.manifest.id

    @property
    def created(self) -> datetime:
        return self.manifest.created

    @property
    def file_count(self) -> int:
        return len(self.manifest.files)


@dataclass(slots=True)
class RestoreReport:
    backup_id: str
    restored: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.restored)

    @property
    def total(self) -> int:
        return len(self.restored) + len(self.skipped)


@dataclass(slots=True)
class RetentionSummary:
    removed: List[str]
    kept: List[str]


__all__ = ["BackupInfo", "RestoreReport", "RetentionSummary"]
