"""Structured Logging: JSON formatter and setup for host processes.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (tool_name, schema, degradation, error_code, tool_count) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - The library never configures logging itself; the embedding process calls
      configure_logging() once at startup
"""

import json
import logging
from datetime import datetime, timezone

from toolschema.config import Settings, get_settings

_EXTRA_KEYS = (
    "tool_name", "schema", "field_name", "degradation",
    "error_code", "tool_count",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging. Returns the installed handler."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """setup_logging() from Settings.log_level / Settings.log_format."""
    settings = settings or get_settings()
    return setup_logging(settings.log_level, settings.log_format)
