"""
Logging setup for the quiz service.

Development gets a readable single-line format; production emits one JSON
object per record so request ids, session ids and error ids can be searched
in a log aggregator.
"""
import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from talentproof.core.config import settings

# Set per request by RequestLoggingMiddleware
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecord attributes (passed via `extra=`) that are copied into JSON output
_EXTRA_FIELDS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_host",
    "session_id",
    "error_id",
)

PLAIN_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_context.get()
        if request_id:
            entry["request_id"] = request_id

        entry.update(
            {name: getattr(record, name) for name in _EXTRA_FIELDS if hasattr(record, name)}
        )

        if record.levelno >= logging.ERROR:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _build_config(log_level: int, use_json: bool, quiet_access_log: bool) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": PLAIN_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {"()": JSONFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if use_json else "default",
                "stream": sys.stdout,
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
        "loggers": {
            # Propagates to the root console handler
            "talentproof": {"level": log_level},
            "uvicorn.access": {
                "level": logging.WARNING if quiet_access_log else logging.INFO,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Apply logging configuration from settings (LOG_LEVEL, ENV, DEBUG)."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.config.dictConfig(
        _build_config(
            log_level,
            use_json=settings.ENV == "production",
            quiet_access_log=settings.DEBUG,
        )
    )
