from __future__ import annotations

import json
import logging
import os
from logging.config import dictConfig
from traceback import format_exception
from typing import Optional

from .env import pick

# Context attributes callers may pass through `extra=`.
CONTEXT_FIELDS = ("register", "schema", "data_source", "action")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for prod and CI logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            err_obj: dict[str, object] = {}
            if exc_type:
                err_obj["type"] = exc_type.__name__
            if exc_value:
                err_obj["message"] = str(exc_value)

            stack = "".join(format_exception(*record.exc_info))
            max_stack = int(os.getenv("LOG_STACK_LIMIT", "4000"))
            err_obj["stack"] = stack[:max_stack] + ("...(truncated)" if len(stack) > max_stack else "")
            payload["error"] = err_obj

        return json.dumps(payload, ensure_ascii=False, default=str)


def _read_level() -> str:
    explicit = os.getenv("LOG_LEVEL")
    if explicit:
        return explicit.upper()
    return pick(prod="INFO", nonprod="DEBUG")


def _read_format() -> str:
    fmt = os.getenv("LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return pick(prod="json", nonprod="plain")


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    level = (level or _read_level()).upper()
    formatter_name = "json" if (fmt or _read_format()) == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter_name,
                }
            },
            "root": {
                "level": level,
                "handlers": ["stream"],
            },
            # SQL echo and per-request httpx lines are noise below WARNING.
            "loggers": {
                "sqlalchemy.engine": {"level": "WARNING", "handlers": [], "propagate": True},
                "httpx": {"level": "WARNING", "handlers": [], "propagate": True},
            },
        }
    )
