"""
Logging setup for the client record access layer.

Services attach context to their records through ``extra=`` (``operation``,
``code``, ``collection``, ``attempt``, ``scenario``, ...). The console format
appends that context to the message as ``key=value`` pairs; the JSON format
emits it as top-level keys next to the level, logger and message.

Usage:
    from client_records.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False)
    log = get_logger(__name__)
    log.warning("[RETRY] list", extra={"operation": "list", "attempt": 1})
    # 2024-05-17 12:30:00 | WARNING | client_records.retry | [RETRY] list | attempt=1 operation=list
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """The ``extra=`` fields of ``record``, sorted by name."""
    return {
        key: value
        for key, value in sorted(vars(record).items())
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


def _json_formatter(record: logging.LogRecord) -> str:
    payload: Dict[str, Any] = {
        "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    payload.update(record_context(record))
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


class ContextFormatter(logging.Formatter):
    """Console formatter appending the record's ``extra=`` context."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = record_context(record)
        if not context:
            return line
        return line + " | " + " ".join(f"{key}={value}" for key, value in context.items())


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Configure root logging for the CLI and the benchmark.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Emit JSON lines instead of the console format.
    force : bool
        Replace handlers already installed on the root logger. When False and
        the root logger has handlers, only its level is changed.
    """
    root = logging.getLogger()
    if not force and root.handlers:
        root.setLevel(level)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": ContextFormatter,
                    "fmt": CONSOLE_FORMAT,
                    "datefmt": CONSOLE_DATEFMT,
                },
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "console",
                    "level": level,
                }
            },
            "root": {"handlers": ["default"], "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["ContextFormatter", "JsonFormatter", "configure_logging", "get_logger", "record_context"]
