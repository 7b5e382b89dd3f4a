"""
Structured logging utilities for the patient client
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LoggingSettings

ROOT_LOGGER = "docsypatient"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Attach a handler to the package logger according to settings.

    Calling it again replaces the previous handlers instead of stacking them.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(settings.level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if settings.file_path:
        handler: logging.Handler = logging.FileHandler(settings.file_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
