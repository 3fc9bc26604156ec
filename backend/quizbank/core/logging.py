"""JSON logging with the current request id attached to every record."""

import contextvars
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from quizbank.core.config import settings

# Set by RequestIDMiddleware for the duration of one request
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "multipart": logging.WARNING,
}


class QuizbankJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record: ``event`` is the message, ``extra`` keys sit beside it."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["event"] = record.getMessage()
        log_record["env"] = settings.ENV

        request_id = request_id_var.get()
        if request_id is not None:
            log_record.setdefault("request_id", request_id)

        log_record.pop("message", None)


def setup_logging(level: str | None = None) -> None:
    """Send JSON records to stdout at ``level`` (defaults to LOG_LEVEL)."""
    level_name = (level or settings.LOG_LEVEL).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(QuizbankJsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
