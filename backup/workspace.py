"""Candidate files a catalog rewrite may touch."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List

WORKSPACE_FILE = "pnpm-workspace.yaml"
PACKAGE_FILE = "package.json"
_SKIP_DIRS = {"node_modules"}


def collect_workspace_files(working_dir: Path) -> List[Path]:
    """Return ``pnpm-workspace.yaml`` followed by every ``package.json``.

    The workspace file is always listed, even when absent, since the store
    skips missing files. ``package.json`` files are listed root first and then
    in path order; ``node_modules`` and hidden directories are not searched.
    """

    root = Path(working_dir)
    files: List[Path] = [root / WORKSPACE_FILE]
    if (root / PACKAGE_FILE).is_file():
        files.append(root / PACKAGE_FILE)

    nested: List[Path] = []
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _SKIP_DIRS and not name.startswith("."))
        if Path(current) == root:
            continue
        if PACKAGE_FILE in filenames:
            nested.append(Path(current) / PACKAGE_FILE)
    files.extend(sorted(nested, key=lambda path: path.relative_to(root).as_posix()))
    return files


__all__ = ["collect_workspace_files"]
