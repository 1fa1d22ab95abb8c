import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from backup.index import list_backups
from backup.retention import _ignore_missing, clear_backups, delete_backup, prune_backups
from core.paths import get_backup_cache_dir


class StubLogger:
    def __init__(self) -> None:
        self.events = []

    def info(self, event: str, **extra):  # pragma: no cover - simple recorder
        self.events.append(("info", event, extra))

    def warning(self, event: str, **extra):  # pragma: no cover - simple recorder
        self.events.append(("warning", event, extra))

    def event(self, *, event: str, phase: str, ok: bool, **extra):  # pragma: no cover - simple recorder
        self.events.append(("event", event, phase, ok, extra))


def _create_snapshots(working_dir, count: int) -> list:
    base = get_backup_cache_dir(working_dir)
    now = datetime.now(timezone.utc)
    backup_ids = []
    for index in range(count):
        created = now - timedelta(days=index)
        backup_id = created.strftime("%Y%m%d_%H%M%S")
        backup_dir = base / backup_id
        (backup_dir / "packages").mkdir(parents=True)
        (backup_dir / "packages" / "package.json").write_text("{}", encoding="utf-8")
        payload = {
            "id": backup_id,
            "timestamp": created.isoformat(),
            "version": "0.0.0-test",
            "description": "",
            "files": [{"relativePath": "packages/package.json"}],
        }
        (backup_dir / "manifest.json").write_text(json.dumps(payload), encoding="utf-8")
        backup_ids.append(backup_id)
    return backup_ids


def test_delete_backup_removes_snapshot(tmp_path) -> None:
    working_dir = tmp_path / "work"
    first, second = _create_snapshots(working_dir, 2)
    logger = StubLogger()

    assert delete_backup(working_dir, first, logger=logger) is True

    assert not (get_backup_cache_dir(working_dir) / first).exists()
    assert [info.backup_id for info in list_backups(working_dir)] == [second]
    assert ("event", "backup_deleted", "retention", True, {"id": first}) in logger.events


def test_delete_missing_backup_returns_false(tmp_path) -> None:
    working_dir = tmp_path / "work"
    backup_ids = _create_snapshots(working_dir, 1)
    before = sorted(path.name for path in get_backup_cache_dir(working_dir).iterdir())

    assert delete_backup(working_dir, "19990101_000000") is False
    assert delete_backup(working_dir, "..") is False
    assert delete_backup(working_dir, "") is False

    assert sorted(path.name for path in get_backup_cache_dir(working_dir).iterdir()) == before
    assert [info.backup_id for info in list_backups(working_dir)] == backup_ids


def test_delete_backup_removes_incomplete_snapshot(tmp_path) -> None:
    working_dir = tmp_path / "work"
    partial = get_backup_cache_dir(working_dir) / "20240101_000000"
    partial.mkdir(parents=True)
    (partial / "a.json").write_text("{}", encoding="utf-8")

    assert delete_backup(working_dir, "20240101_000000") is True
    assert not partial.exists()


def test_remove_tree_ignores_only_missing_entries() -> None:
    assert _ignore_missing(os.unlink, "gone.json", FileNotFoundError("gone.json")) is None
    with pytest.raises(PermissionError):
        _ignore_missing(os.unlink, "locked.json", PermissionError("locked.json"))


def test_clear_backups_deletes_every_valid_snapshot(tmp_path) -> None:
    working_dir = tmp_path / "work"
    _create_snapshots(working_dir, 3)
    broken = get_backup_cache_dir(working_dir) / "broken"
    broken.mkdir()

    assert clear_backups(working_dir) == 3
    assert list_backups(working_dir) == []
    assert broken.exists()


def test_clear_backups_on_empty_store_writes_nothing(tmp_path) -> None:
    working_dir = tmp_path / "work"

    assert clear_backups(working_dir) == 0
    assert not working_dir.exists()


def test_clear_backups_logs_only_when_something_was_deleted(tmp_path) -> None:
    working_dir = tmp_path / "work"
    logger = StubLogger()

    assert clear_backups(working_dir, logger=logger) == 0
    assert logger.events == []

    _create_snapshots(working_dir, 2)
    assert clear_backups(working_dir, logger=logger) == 2
    assert logger.events[-1] == ("event", "backups_cleared", "retention", True, {"removed": 2})


@pytest.mark.parametrize("keep_last", [0, -1])
def test_prune_backups_disabled(tmp_path, keep_last) -> None:
    working_dir = tmp_path / "work"
    backup_ids = _create_snapshots(working_dir, 3)

    summary = prune_backups(working_dir, keep_last)

    assert summary.removed == []
    assert summary.kept == backup_ids


def test_prune_backups_keeps_most_recent(tmp_path) -> None:
    working_dir = tmp_path / "work"
    logger = StubLogger()
    backup_ids = _create_snapshots(working_dir, 4)

    summary = prune_backups(working_dir, 2, logger=logger)

    assert set(summary.removed) == set(backup_ids[2:])
    assert summary.kept == backup_ids[:2]
    for backup_id in summary.removed:
        assert not (get_backup_cache_dir(working_dir) / backup_id).exists()
    assert [info.backup_id for info in list_backups(working_dir)] == backup_ids[:2]


def test_prune_backups_with_nothing_to_remove_logs_nothing(tmp_path) -> None:
    working_dir = tmp_path / "work"
    logger = StubLogger()
    backup_ids = _create_snapshots(working_dir, 2)

    summary = prune_backups(working_dir, 5, logger=logger)

    assert summary.removed == []
    assert summary.kept == backup_ids
    assert logger.events == []
