"""Structured event logging for the scheduler.

Every event is written twice: a one-line ``key=value`` summary for humans
(console and ``*-human.log``) and a JSON object per line for machines
(``LOG_FILE``). File output can be disabled with ``ENABLE_FILE_LOGS=0``.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/scheduler.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

HUMAN_KEYS = ("candidate_id", "job_id", "status", "event", "count", "ms", "outcome", "error")

_logger = logging.getLogger("scheduler")
_logger.setLevel(LOG_LEVEL)
_logger.propagate = False


def _is_json(record: logging.LogRecord) -> bool:
    return getattr(record, "is_json", False) is True


def _human_formatter() -> logging.Formatter:
    return logging.Formatter("[%(asctime)s] %(levelname)s %(name)s :: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


def _rotating(path: str, formatter: logging.Formatter, want_json: bool) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setLevel(LOG_LEVEL)
    handler.setFormatter(formatter)
    handler.addFilter(lambda record: _is_json(record) is want_json)
    return handler


def _human_log_path(path: str) -> str:
    stem, _ = os.path.splitext(path)
    return f"{stem}-human.log"


def _ensure_handlers() -> None:
    if _logger.handlers:
        return

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(LOG_LEVEL)
    console.setFormatter(_human_formatter())
    console.addFilter(lambda record: not _is_json(record))
    _logger.addHandler(console)

    if not ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    _logger.addHandler(_rotating(LOG_FILE, logging.Formatter("%(message)s"), want_json=True))
    _logger.addHandler(_rotating(_human_log_path(LOG_FILE), _human_formatter(), want_json=False))


def _summary(evt: dict[str, Any]) -> str:
    parts = [f"interview={evt.get('interview_id')}", f"kind={evt.get('kind')}"]
    parts.extend(f"{key}={evt[key]}" for key in HUMAN_KEYS if key in evt)
    return " ".join(parts)


def _emit(level: int, msg: str, is_json: bool) -> None:
    record = _logger.makeRecord(_logger.name, level, "", 0, msg, (), None)
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, interview_id: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log one scheduler event; ``interview_id`` is ``"-"`` for batch events."""

    _ensure_handlers()
    payload: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "interview_id": interview_id,
        **fields,
    }
    _emit(level, _summary(payload), is_json=False)
    if ENABLE_FILE_LOGS:
        _emit(level, json.dumps(payload, ensure_ascii=False, default=str), is_json=True)


__all__ = ["log_event"]
