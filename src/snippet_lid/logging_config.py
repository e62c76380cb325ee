"""
Logging configuration for the snippet-lid CLI and HTTP service.

Library modules only create loggers; handlers are installed here, by entrypoints.

- SNIPPET_LID_LOG_FORMAT=json: one JSON object per line
- default: human-readable format for terminals
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from arguments / SNIPPET_LID_LOG_* environment variables."""
    log_format = os.getenv("SNIPPET_LID_LOG_FORMAT", "text").lower()
    log_level = (level or os.getenv("SNIPPET_LID_LOG_LEVEL", "WARNING")).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Remove any existing handlers to avoid duplicates on repeated setup.
    root_logger.handlers.clear()

    # stderr: stdout carries classification output.
    handler = logging.StreamHandler(sys.stderr)

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
