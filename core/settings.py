from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import get_settings_path
from .settings_schema import SETTINGS_VALIDATOR

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_VERSION",
    "backup_settings",
    "coerce_bool",
    "load_settings",
    "merge_defaults",
    "save_settings",
    "update_settings",
]

LOGGER = logging.getLogger("pcc.settings")

SETTINGS_VERSION = 1


DEFAULT_SETTINGS: Dict[str, Any] = {
    "version": SETTINGS_VERSION,
    "backup": {
        # Ask before restore/clear unless -y is passed.
        "confirm": True,
        # 0 disables pruning after each new snapshot.
        "keep_last": 0,
        "delete_after_restore": False,
    },
    "logging": {
        "level": "WARNING",
        "json": False,
    },
}


def merge_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    def _merge(default: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in default.items():
            if isinstance(value, dict):
                current = payload.get(key)
                if isinstance(current, dict):
                    result[key] = _merge(value, current)
                else:
                    result[key] = _merge(value, {})
            elif isinstance(value, list):
                current = payload.get(key)
                result[key] = list(current) if isinstance(current, list) else list(value)
            else:
                result[key] = payload.get(key, value)
        for key, value in payload.items():
            if key not in result:
                result[key] = value
        return result

    return _merge(DEFAULT_SETTINGS, data or {})


def _apply_migrations(settings: Dict[str, Any]) -> Dict[str, Any]:
    version = settings.get("version")
    try:
        version_int = int(version)
    except (TypeError, ValueError):
        version_int = 0
    if version_int < SETTINGS_VERSION:
        settings["version"] = SETTINGS_VERSION
    return settings


def _log_unknown_keys(settings: Dict[str, Any], path: Path) -> None:
    unknown = list(SETTINGS_VALIDATOR.unknown_keys(settings))
    if not unknown:
        return
    LOGGER.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))


def load_settings(working_dir: Path) -> Dict[str, Any]:
    path = get_settings_path(working_dir)
    data: Dict[str, Any] = {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            loaded = json.load(handle)
    except FileNotFoundError:
        loaded = None
    except json.JSONDecodeError as exc:
        LOGGER.warning("Settings file %s is not valid JSON: %s", path, exc)
        loaded = None
    except OSError as exc:
        LOGGER.warning("Settings file %s could not be read: %s", path, exc)
        loaded = None
    if isinstance(loaded, dict):
        data = loaded
    merged = merge_defaults(data)
    merged = _apply_migrations(merged)
    merged.setdefault("working_dir", str(working_dir))
    _log_unknown_keys(merged, path)
    return merged


def save_settings(settings: Dict[str, Any], working_dir: Path) -> None:
    merged = merge_defaults(dict(settings))
    merged = _apply_migrations(merged)
    merged.pop("working_dir", None)
    path = get_settings_path(working_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(merged, handle, ensure_ascii=False, indent=2)


def update_settings(working_dir: Path, **values: Any) -> None:
    current = load_settings(working_dir)
    current.update(values)
    save_settings(current, working_dir)


def coerce_bool(value: Any) -> Optional[bool]:
    """Read a settings flag; ``None`` when *value* is not a recognisable boolean."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in {"1", "true", "yes", "on"}:
            return True
        if lower in {"0", "false", "no", "off"}:
            return False
    return None


def backup_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Return the ``backup`` block of *settings* with defaults applied."""

    raw = settings.get("backup") if isinstance(settings, dict) else None
    block = dict(DEFAULT_SETTINGS["backup"])
    if isinstance(raw, dict):
        block.update(raw)
    try:
        block["keep_last"] = max(int(block.get("keep_last") or 0), 0)
    except (TypeError, ValueError):
        block["keep_last"] = 0
    for name in ("confirm", "delete_after_restore"):
        parsed = coerce_bool(block.get(name))
        block[name] = DEFAULT_SETTINGS["backup"][name] if parsed is None else parsed
    return block
