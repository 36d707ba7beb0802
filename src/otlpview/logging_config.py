"""
Logging setup for otlpview.

Console output goes to stderr so it never mixes with rendered tables on
stdout. ``standard`` uses Rich formatting, ``json`` emits one object per line.
"""

import json
import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler

from otlpview.config import settings

LOGGER_NAME = "otlpview"


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """
    Configure the ``otlpview`` logger.

    Safe to call repeatedly; handlers installed by a previous call are
    replaced.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        fmt: ``standard`` or ``json``, defaults to ``settings.log_format``

    Returns:
        The configured package logger

    Raises:
        ValueError: If the level name is not a logging level
    """
    level = (level or settings.log_level).upper()
    fmt = (fmt or settings.log_format).lower()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level!r}")

    handler: logging.Handler
    if fmt == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
