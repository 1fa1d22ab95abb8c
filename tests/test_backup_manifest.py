import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from backup.manifest import (
    ManifestFile,
    SnapshotManifest,
    format_backup_time,
    parse_timestamp,
    read_manifest,
    write_manifest,
)


def test_parse_timestamp_accepts_zulu_and_naive_values() -> None:
    expected = datetime(2024, 5, 1, 8, 20, 30, 123000, tzinfo=timezone.utc)

    assert parse_timestamp("2024-05-01T08:20:30.123Z") == expected
    assert parse_timestamp("2024-05-01T08:20:30.123000+00:00") == expected
    assert parse_timestamp("2024-05-01T08:20:30.123") == expected


def test_format_backup_time_uses_local_display_layout() -> None:
    value = "2024-05-01T08:20:30.999Z"
    expected = datetime(2024, 5, 1, 8, 20, 30, tzinfo=timezone.utc).astimezone().strftime("%Y-%m-%d %H:%M:%S")

    assert format_backup_time(value) == expected


def test_write_manifest_is_pretty_and_uses_field_names(tmp_path) -> None:
    manifest = SnapshotManifest(
        id="20240501_102030",
        timestamp="2024-05-01T08:20:30.123456+00:00",
        version="1.2.3",
        description="split catalog",
        files=[ManifestFile(relative_path="pnpm-workspace.yaml"), ManifestFile(relative_path="a/package.json")],
    )
    path = tmp_path / "manifest.json"
    write_manifest(path, manifest)

    text = path.read_text(encoding="utf-8")
    assert '\n    "description": "split catalog"' in text
    payload = json.loads(text)
    assert payload == {
        "id": "20240501_102030",
        "timestamp": "2024-05-01T08:20:30.123456+00:00",
        "version": "1.2.3",
        "description": "split catalog",
        "files": [{"relativePath": "pnpm-workspace.yaml"}, {"relativePath": "a/package.json"}],
    }
    assert not (tmp_path / "manifest.json.tmp").exists()
    assert read_manifest(path) == manifest


def test_manifest_defaults_version_and_description() -> None:
    manifest = SnapshotManifest.model_validate({"id": "x", "timestamp": "2024-01-01T00:00:00Z", "files": []})

    assert manifest.version == "unknown"
    assert manifest.description == ""


@pytest.mark.parametrize(
    "payload",
    [
        {"timestamp": "2024-01-01T00:00:00Z", "files": []},
        {"id": "x", "timestamp": "not a time", "files": []},
        {"id": "../x", "timestamp": "2024-01-01T00:00:00Z", "files": []},
        {"id": "x", "timestamp": "2024-01-01T00:00:00Z", "files": [{"relativePath": "../outside.json"}]},
        {"id": "x", "timestamp": "2024-01-01T00:00:00Z", "files": [{"relativePath": "/etc/passwd"}]},
        {"id": "x", "timestamp": "2024-01-01T00:00:00Z", "files": [{"path": "a.json"}]},
        {"id": "x", "timestamp": "2024-01-01T00:00:00Z", "files": "a.json"},
    ],
)
def test_invalid_manifests_are_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        SnapshotManifest.model_validate(payload)


def test_read_manifest_rejects_malformed_json(tmp_path) -> None:
    path = tmp_path / "manifest.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        read_manifest(path)
