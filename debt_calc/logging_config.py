"""Logging setup for the engine and the command-line tool."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import Settings

ROOT_LOGGER = "debt_calc"

# Context the engine attaches through ``extra=``; anything else is dropped.
CONTEXT_FIELDS = ("strategy", "loan_id", "loans", "months", "total_interest", "path", "log_json")


class JSONFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, message and run context."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Attach a single console handler to the ``debt_calc`` logger.

    Calling this twice replaces the handler rather than duplicating output.
    """
    settings = settings or Settings.from_env()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, settings.log_level, logging.WARNING))
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logger.addHandler(handler)
    logger.debug("Logging initialized", extra={"log_json": settings.log_json})
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger (``debt_calc.<name>``)."""
    if name.startswith(ROOT_LOGGER + ".") or name == ROOT_LOGGER:
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
