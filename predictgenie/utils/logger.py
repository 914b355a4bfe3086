"""
predictgenie/utils/logger.py

Logging helpers for PredictGenie. Every module asks `get_logger()` for a
`predictgenie.<name>` logger that writes to `<LOGS_DIR>/<name>.log` (rotated
by size or by time) and, unless told otherwise, to stderr as well.

Context goes in `extra=` and is rendered after the message:

    logger = get_logger("csv_parser")
    logger.info("Parsed CSV", extra={"rows": 3})
    # 2025-01-01 12:00:00 - predictgenie.csv_parser - INFO - Parsed CSV [rows=3]

Set LOG_LEVEL to change the default level and LOG_FORMAT=json for one JSON
object per line.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# LogRecord attributes that are not caller-supplied `extra` fields
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "message", "asctime",
    )
)


def record_extras(record: logging.LogRecord) -> dict:
    """Return the `extra={...}` fields attached to a log record."""
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus exc_info/extra when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = dict(
            ts=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            msg=record.getMessage(),
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        extras = record_extras(record)
        if extras:
            payload["extra"] = extras
        return json.dumps(payload, default=str)


class ExtrasFormatter(logging.Formatter):
    """Plain text lines with `extra` fields appended as `[k=v ...]`."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in extras.items())
        return f"{line} [{pairs}]"


def _default_level() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _make_formatter(use_json: bool, fmt: Optional[str], datefmt: str) -> logging.Formatter:
    if use_json:
        return JsonFormatter(datefmt=datefmt)
    return ExtrasFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)


def _make_file_handler(
    path: Path, rotation: str, max_bytes: int, backup_count: int
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    if rotation == "time":
        return logging.handlers.TimedRotatingFileHandler(
            filename=str(path), when="midnight", backupCount=backup_count, encoding="utf-8"
        )
    return logging.handlers.RotatingFileHandler(
        filename=str(path), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def get_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Optional[int] = None,
    rotation: str = "size",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    console: bool = True,
    use_json: Optional[bool] = None,
    fmt: Optional[str] = None,
    datefmt: str = DEFAULT_DATEFMT,
) -> logging.Logger:
    """
    Configure and return the `predictgenie.<name>` logger.

    `rotation` is "size" (max_bytes per file) or "time" (daily at midnight).
    Calling again with the same name drops the old handlers first, so tests
    and reloads can point a logger at a new file.
    """
    logger = logging.getLogger(f"predictgenie.{name}")
    level = _default_level() if level is None else level
    if use_json is None:
        use_json = os.getenv("LOG_FORMAT", "").lower() == "json"

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    path = Path(log_file) if log_file else Path(os.getenv("LOGS_DIR", "logs")) / f"{name}.log"
    formatter = _make_formatter(use_json, fmt, datefmt)

    handlers = [_make_file_handler(path, rotation, max_bytes, backup_count)]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    # handlers are attached here; the root logger would print twice
    logger.propagate = False
    return logger
