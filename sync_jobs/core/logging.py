"""Logging utilities for the job-creation service."""

from __future__ import annotations

import logging
import sys
from typing import Any

import orjson

_DEFAULT_LEVEL = "INFO"


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents.

    Record attributes prefixed with `ctx_` (passed through `extra=`) are copied
    into the payload.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                payload[key] = value
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(level: str | int = _DEFAULT_LEVEL, use_json: bool = True) -> None:
    """Configure the root logger with a stdout handler.

    Args:
        level: Root log level.
        use_json: Whether to emit JSON lines instead of plain text.

    Returns:
        None: Root logger is reconfigured as a side effect.
    """

    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.handlers = [handler]


def get_logger(name: str = "sync_jobs") -> logging.Logger:
    """Return a named module logger."""

    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
