"""
Logging configuration for Gnostic.

Operator-facing logs go to stderr through a Rich handler, or as JSON lines
when GNOSTIC_LOG_FORMAT=json. User-facing diagnostics never go through
logging; they are written to the error sink.
"""

import json
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from gnostic.config import settings


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure the root gnostic logger.

    Args:
        level: Log level name (defaults to settings.log_level)
        log_format: 'standard' or 'json' (defaults to settings.log_format)

    Calling this more than once replaces the previously installed handler.
    """
    level_name = (level or settings.log_level).upper()
    fmt = (log_format or settings.log_format).lower()

    logger = logging.getLogger("gnostic")
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

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

    logger.addHandler(handler)
    logger.propagate = False
