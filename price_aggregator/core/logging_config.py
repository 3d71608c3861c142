"""
Logging configuration for Crypto Price Aggregator Service.
LOG_FORMAT selects JSON lines (python-json-logger) or plain text.
"""

import logging
import logging.config
import sys
from typing import Dict, Any
from pythonjsonlogger import jsonlogger

from .config import settings

LOGGER_NAMESPACE = "price_aggregator"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Extra fields passed via `extra={...}` are appended by the JSON formatter
FORMATTERS: Dict[str, Dict[str, Any]] = {
    "json": {
        "()": jsonlogger.JsonFormatter,
        "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        "datefmt": DATE_FORMAT
    },
    "text": {
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "datefmt": DATE_FORMAT
    }
}


def get_logging_config(log_format: str, log_level: str) -> Dict[str, Any]:
    """Build a dictConfig for one console handler in the given format."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {log_format: dict(FORMATTERS[log_format])},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": log_format,
                "stream": sys.stdout
            }
        },
        "root": {
            "handlers": ["console"],
            "level": log_level
        }
    }


def setup_logging() -> None:
    """Configure logging from settings and quiet the HTTP client libraries."""
    logging.config.dictConfig(get_logging_config(settings.log_format, settings.log_level))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_logger(module_name: str) -> logging.Logger:
    """Create a logger under the service namespace."""
    if module_name == LOGGER_NAMESPACE or module_name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{module_name}")
