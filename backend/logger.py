"""Logging setup shared by every backend module.

Call ``get_logger(__name__)`` at module import time. Level comes from
``LOG_LEVEL``; ``LOG_FORMAT=json`` switches the stderr handler to one JSON
object per line for log aggregation.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class LoggerConfig:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()

    _initialized = False

    @classmethod
    def setup_logging(cls) -> None:
        """Attach one stderr handler to the package loggers. Idempotent."""
        if cls._initialized:
            return

        handler = logging.StreamHandler(sys.stderr)
        if cls.LOG_FORMAT == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(
                    fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, cls.LOG_LEVEL, logging.INFO))
        root_logger.addHandler(handler)

        cls._initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Reflow test failed", extra={"extra_fields": {"url": url}})
    """
    LoggerConfig.setup_logging()
    return logging.getLogger(name)
