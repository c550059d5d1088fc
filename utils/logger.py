"""JSON logging for scoring services.

Every record carries ``athlete_id``, ``op`` and ``latency_ms`` (``null`` when
not given). Scoring results (``score``, ``tier``, ``rejected``) and delivery
details (``chat_id``, ``alerts``) are added only when a call passes them.
Athlete identifiers and names are masked before anything is written.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import deepcopy
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from time import perf_counter
from typing import Any

from utils.personal_data import scrub_sensitive_mapping

__all__ = ["OperationTimer", "get_logger"]

LOG_DIR = Path("logs")
LOG_FILE_NAME = "athlete_hub.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

CONTEXT_FIELDS: tuple[str, ...] = ("athlete_id", "op", "latency_ms")
RESULT_FIELDS: tuple[str, ...] = ("score", "tier", "rejected", "chat_id", "alerts")

_FILE_FLAG = "_athlete_hub_file"
_STREAM_FLAG = "_athlete_hub_stream"


class JsonLogFormatter(logging.Formatter):
    """Render a record as one masked JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            payload[key] = getattr(record, key, None)
        for key in RESULT_FIELDS:
            if hasattr(record, key):
                payload[key] = deepcopy(getattr(record, key))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        scrub_sensitive_mapping(payload)
        return json.dumps(payload, ensure_ascii=False, default=str)


class OperationTimer:
    """Measure one service operation and build the ``extra`` for its logs.

    >>> timer = OperationTimer("score_sleep", athlete_id="a-1")
    >>> sorted(timer.extra(score=97))
    ['athlete_id', 'latency_ms', 'op', 'score']
    """

    def __init__(self, op: str, *, athlete_id: str | None = None) -> None:
        self.op = op
        self.athlete_id = athlete_id
        self._started = perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return round((perf_counter() - self._started) * 1000, 2)

    def extra(self, **fields: Any) -> dict[str, Any]:
        return {
            "athlete_id": self.athlete_id,
            "op": self.op,
            "latency_ms": self.elapsed_ms,
            **fields,
        }


def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    setattr(handler, _FILE_FLAG, True)
    return handler


def _stream_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(logging.WARNING)
    setattr(handler, _STREAM_FLAG, True)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger with one JSON file and one stderr handler."""

    logger = logging.getLogger(name)
    for flag, factory in ((_STREAM_FLAG, _stream_handler), (_FILE_FLAG, _file_handler)):
        if not any(getattr(handler, flag, False) for handler in logger.handlers):
            handler = factory()
            handler.setFormatter(JsonLogFormatter())
            logger.addHandler(handler)

    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger
