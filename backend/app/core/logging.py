"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from app.core.context import get_request_id, get_user_id

# Chatty third-party loggers and the level they are held at.
QUIET_LOGGERS = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
}


class RequestContextFilter(logging.Filter):
    """Add request_id and user_id attributes to log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        record.user_id = get_user_id() or "-"
        return True


def configure_logging(*, log_level: str = "INFO", sql_echo: bool = False) -> None:
    """Configure application logging once at startup."""
    if getattr(configure_logging, "_configured", False):
        return

    loggers = {name: {"level": level} for name, level in QUIET_LOGGERS.items()}
    loggers["sqlalchemy.engine"] = {"level": "INFO" if sql_echo else "WARNING"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(user_id)s | %(message)s",
                }
            },
            "filters": {
                "request_context": {
                    "()": "app.core.logging.RequestContextFilter",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": log_level,
                    "filters": ["request_context"],
                }
            },
            "loggers": loggers,
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at %s (sql_echo=%s)", log_level, sql_echo)
    setattr(configure_logging, "_configured", True)
