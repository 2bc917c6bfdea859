"""Structured JSON logging."""
import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Optional


def get_log_level() -> int:
    level = logging.getLevelName(os.getenv("APP__LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


class StructuredLogger:
    """Logger that outputs one JSON object per record."""

    def __init__(self, service_name: str, level: Optional[int] = None):
        self.service_name = service_name
        self.logger = logging.getLogger(service_name)
        self.logger.setLevel(level if level is not None else get_log_level())
        self.logger.propagate = False

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()
        self.logger.addHandler(self._setup_handler(sys.stdout))

    def _setup_handler(self, stream):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter(self.service_name))
        return handler

    def info(self, message: str, **context):
        self.logger.info(message, extra={"context": context})

    def warning(self, message: str, **context):
        self.logger.warning(message, extra={"context": context})

    def error(self, message: str, exc_info=False, **context):
        """Log an error; exc_info may be True or an exception instance."""
        self.logger.error(message, exc_info=exc_info, extra={"context": context})


class JsonFormatter(logging.Formatter):
    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            log_entry.update(context)

        if record.exc_info:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_entry, default=str)


def get_logger(service_name: Optional[str] = None, level: Optional[int] = None) -> StructuredLogger:
    """Get a structured logger, named after the service by default."""
    name = service_name or os.getenv("APP__SERVICE_NAME", "order-management")
    return StructuredLogger(service_name=name, level=level)
