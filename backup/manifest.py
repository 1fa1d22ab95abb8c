"""Snapshot manifest schema and (de)serialisation.

A manifest is stored as ``manifest.json`` next to the captured files::

    {
        "description": "split catalog: lint, test",
        "files": [
            {
                "relativePath": "pnpm-workspace.yaml"
            }
        ],
        "id": "20240501_102030",
        "timestamp": "2024-05-01T08:20:30.123456+00:00",
        "version": "0.3.0"
    }
"""
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.versioning import UNKNOWN_VERSION

from .ids import is_safe_backup_id

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 manifest timestamp into an aware datetime.

    A trailing ``Z`` is accepted and naive values are taken as UTC.
    """

    text = value.strip()
    if text[-1:] in {"Z", "z"}:
        text = f"{text[:-1]}+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_backup_time(value: str) -> str:
    """Render a manifest timestamp as local ``YYYY-MM-DD HH:MM:SS``."""

    return parse_timestamp(value).astimezone().strftime(DISPLAY_FORMAT)


class ManifestFile(BaseModel):
    """One captured file, relative to the working directory."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    relative_path: str = Field(..., alias="relativePath", min_length=1)

    @field_validator("relative_path")
    @classmethod
    def _inside_working_dir(cls, value: str) -> str:
        posix = PurePosixPath(value)
        if posix.is_absolute() or PureWindowsPath(value).is_absolute():
            raise ValueError(f"relativePath must be relative: {value!r}")
        if ".." in posix.parts or ".." in PureWindowsPath(value).parts:
            raise ValueError(f"relativePath escapes the working directory: {value!r}")
        return value


class SnapshotManifest(BaseModel):
    """Metadata describing one snapshot."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    timestamp: str
    version: str = UNKNOWN_VERSION
    description: str = ""
    files: List[ManifestFile] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _safe_id(cls, value: str) -> str:
        if not is_safe_backup_id(value):
            raise ValueError(f"invalid backup id: {value!r}")
        return value

    @field_validator("timestamp")
    @classmethod
    def _parsable_timestamp(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @property
    def created(self) -> datetime:
        return parse_timestamp(self.timestamp)

    @property
    def relative_paths(self) -> List[str]:
        return [entry.relative_path for entry in self.files]

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def read_manifest(path: Path) -> SnapshotManifest:
    """Load and validate *path*.

    Raises ``OSError`` when unreadable and ``ValueError`` (including pydantic's
    ``ValidationError``) when the content is not a valid manifest.
    """

    text = Path(path).read_text(encoding="utf-8")
    return SnapshotManifest.model_validate_json(text)


def write_manifest(path: Path, manifest: SnapshotManifest) -> None:
    """Write *manifest* to *path* through a temporary file and a rename."""

    path = Path(path)
    tmp_path = path.with_name(f"{path.name}.tmp")
    with tmp_path.open("w", encoding="utf-8") as handle:
        json.dump(manifest.to_payload(), handle, indent=4, sort_keys=True, ensure_ascii=False)
        handle.write("\n")
    os.replace(tmp_path, path)


__all__ = [
    "ManifestFile",
    "SnapshotManifest",
    "format_backup_time",
    "parse_timestamp",
    "read_manifest",
    "utcnow",
    "write_manifest",
]
