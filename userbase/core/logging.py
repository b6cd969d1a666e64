"""Central logging configuration for the application.

Logs go to stdout as text or one JSON object per line. Configuration is read
from environment variables, not Settings, because it runs at import time of
``userbase.main`` before any request-scoped dependency exists.

Env vars:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
- LOG_JSON: true/false (default: false)
- LOG_REQUESTS: true/false (default: true)
- LOG_UVICORN_ACCESS: true/false; defaults to the opposite of LOG_REQUESTS so
  each request is logged once
- SQL_LOG_LEVEL: level of the sqlalchemy.engine logger (default: WARNING)
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Extras attached by middleware, exception handlers and services.
EXTRA_KEYS = (
    "request_id",
    "method",
    "path",
    "query",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_agent",
    "error_type",
    "error_code",
    "user_id",
    "role_id",
)


def env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


class JsonFormatter(logging.Formatter):
    """One JSON object per record; only known extras are emitted."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, record.__dict__[key]) for key in EXTRA_KEYS if key in record.__dict__
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # UUIDs and datetimes in extras are rendered with str().
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logging_config(
    level: str,
    *,
    json_output: bool,
    uvicorn_access: bool,
    sql_level: str,
) -> dict[str, Any]:
    """Return a dictConfig routing app, uvicorn and SQLAlchemy logs to stdout."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"format": TEXT_FORMAT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if json_output else "text",
                "stream": sys.stdout,
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            # Uvicorn installs its own handlers; propagate into ours instead.
            "uvicorn": {"level": level, "propagate": True},
            "uvicorn.error": {"level": level, "propagate": True},
            "uvicorn.access": {
                "level": "INFO" if uvicorn_access else "WARNING",
                "propagate": True,
            },
            "sqlalchemy.engine": {"level": sql_level, "propagate": True},
        },
    }


def configure_logging() -> None:
    """Configure stdlib logging for the app, uvicorn and SQLAlchemy."""
    log_requests = env_flag("LOG_REQUESTS", default=True)
    config = build_logging_config(
        os.getenv("LOG_LEVEL", "INFO").upper(),
        json_output=env_flag("LOG_JSON", default=False),
        uvicorn_access=env_flag("LOG_UVICORN_ACCESS", default=not log_requests),
        sql_level=os.getenv("SQL_LOG_LEVEL", "WARNING").upper(),
    )
    logging.config.dictConfig(config)
