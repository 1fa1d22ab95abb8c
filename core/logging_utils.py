from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Dict, Optional, TextIO

__all__ = ["JsonLogFormatter", "configure_logging"]

_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"
_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in getattr(record, "__dict__", {}).items():
            if key.startswith("_") or key in _STANDARD_ATTRS:
                continue
            if key in payload:
                continue
            try:
                json.dumps(value)
            except TypeError:
                continue
            payload[key] = value
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    level: str | int = "WARNING",
    *,
    json_output: bool = False,
    name: str = "pcc",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach a single stderr handler to the ``pcc`` logger tree."""

    logger = logging.getLogger(name)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.WARNING
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_pcc_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonLogFormatter() if json_output else logging.Formatter(_PLAIN_FORMAT))
    handler._pcc_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
