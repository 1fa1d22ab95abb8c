"""Helpers for resolving the running pcc-backup version."""
from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata

DISTRIBUTION_NAME = "pcc-backup"
VERSION_ENV = "PCC_VERSION"
UNKNOWN_VERSION = "unknown"


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the producer version recorded in snapshot manifests.

    ``PCC_VERSION`` overrides the installed distribution metadata. When
    neither is available the version is ``"unknown"``.
    """

    override = os.environ.get(VERSION_ENV)
    if override and override.strip():
        return override.strip()
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


__all__ = ["UNKNOWN_VERSION", "get_app_version"]
