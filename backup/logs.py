"""JSONL event trail for snapshot operations."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.paths import get_backup_log_path

LOGGER = logging.getLogger("pcc.backup")


class BackupLogger:
    """Record one JSON line per snapshot event.

    Lines are appended to ``node_modules/.cache/pcc/backup.jsonl`` beside the
    snapshot store and echoed to the ``pcc.backup`` logger. The file and its
    parent are only created on the first persisted event; ``persist=False``
    echoes without touching disk.
    """

    def __init__(self, working_dir: Path, *, persist: bool = True) -> None:
        self.log_path = get_backup_log_path(Path(working_dir))
        self.persist = persist

    def event(self, *, event: str, phase: str, ok: bool, **extra: Any) -> None:
        """Record the outcome of an operation phase (create, restore, retention)."""

        self._emit(logging.INFO if ok else logging.ERROR, event, ok, phase=phase, **extra)

    def info(self, event: str, **extra: Any) -> None:
        self._emit(logging.INFO, event, True, **extra)

    def warning(self, event: str, **extra: Any) -> None:
        self._emit(logging.WARNING, event, False, **extra)

    def _emit(self, level: int, event: str, ok: bool, **fields: Any) -> None:
        record = {"ts": datetime.now(timezone.utc).isoformat(), **fields, "event": event, "ok": bool(ok)}
        line = json.dumps(record, sort_keys=True, default=str)
        if self.persist:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        LOGGER.log(level, "%s", line)


__all__ = ["BackupLogger"]
