"""Logging setup for the ``retrycase`` logger hierarchy.

Library modules log through ``logging.getLogger("retrycase.<area>")`` and
never configure handlers themselves. Applications that want retry activity
on a stream call configure_logging() once at startup.

Example:
    >>> from retrycase.runtime.observability import configure_logging
    >>> configure_logging(format="text", level="DEBUG")
    >>> configure_logging(format="json")  # JSON lines for log aggregation
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from retrycase.foundation.config import get_settings

ROOT_LOGGER = "retrycase"
_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str).decode()


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches settings field name
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> logging.Logger:
    """Attach a single handler to the ``retrycase`` logger.

    Args:
        format: "text" or "json" (default: RETRYCASE_LOG_FORMAT)
        level: Minimum level name (default: RETRYCASE_LOG_LEVEL)
        output: Stream to write to (default: stderr)

    Returns:
        The configured ``retrycase`` logger
    """
    settings = get_settings().logging
    format = format or settings.format
    level = (level or settings.level).upper()

    formatter: logging.Formatter
    if format == "text":
        formatter = logging.Formatter(_TEXT_FORMAT)
    elif format == "json":
        formatter = JsonFormatter()
    else:
        raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
