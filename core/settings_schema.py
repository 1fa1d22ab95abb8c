from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

# Top-level key -> allowed sub-keys, or None for a scalar value.
_ALLOWED_KEYS: Dict[str, Optional[FrozenSet[str]]] = {
    "version": None,
    "working_dir": None,
    "backup": frozenset({"confirm", "keep_last", "delete_after_restore"}),
    "logging": frozenset({"level", "json"}),
}


@dataclass(slots=True)
class SettingsValidator:
    allowed: Mapping[str, Optional[FrozenSet[str]]]

    def unknown_keys(self, payload: Mapping[str, Any]) -> List[str]:
        """Return dotted names of keys the settings file does not define."""

        unknown: List[str] = []
        for section, value in payload.items():
            if section not in self.allowed:
                unknown.append(section)
                continue
            fields = self.allowed[section]
            if fields is None or not isinstance(value, Mapping):
                continue
            unknown.extend(f"{section}.{name}" for name in value if name not in fields)
        return sorted(unknown)


SETTINGS_VALIDATOR = SettingsValidator(_ALLOWED_KEYS)

__all__ = ["SETTINGS_VALIDATOR", "SettingsValidator"]
