"""Logging setup for the advisor API and its scripts."""

import logging
import os
from logging.config import dictConfig
from typing import Any, Dict, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
TELEMETRY_LOG_FORMAT = "%(asctime)s %(message)s"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in {"1", "true", "yes"}


def build_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    """dictConfig for the app.

    ``ADVISOR_LOG_LEVEL`` sets the app level; telemetry lines get their own
    handler and level (``ADVISOR_TELEMETRY_LOG_LEVEL``) and do not repeat on the
    root handler. ``ADVISOR_DEBUG_HTTP=1`` opens up httpx and access logs, and
    ``ADVISOR_DEBUG_SQL=1`` logs every statement.
    """
    app_level = (level or os.getenv("ADVISOR_LOG_LEVEL", "INFO")).upper()
    http_level = "DEBUG" if _env_flag("ADVISOR_DEBUG_HTTP") else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": DEFAULT_LOG_FORMAT},
            "telemetry": {"format": TELEMETRY_LOG_FORMAT},
        },
        "handlers": {
            "default": {"class": "logging.StreamHandler", "formatter": "default"},
            "telemetry": {"class": "logging.StreamHandler", "formatter": "telemetry"},
        },
        "loggers": {
            "advisor": {"level": app_level},
            "advisor.telemetry": {
                "level": os.getenv("ADVISOR_TELEMETRY_LOG_LEVEL", "INFO").upper(),
                "handlers": ["telemetry"],
                "propagate": False,
            },
            "sqlalchemy.engine": {"level": "INFO" if _env_flag("ADVISOR_DEBUG_SQL") else "WARNING"},
            "httpx": {"level": http_level},
            "uvicorn.access": {"level": "INFO" if http_level == "DEBUG" else "WARNING"},
        },
        "root": {"handlers": ["default"], "level": app_level},
    }


def configure_logging(level: Optional[str] = None) -> None:
    dictConfig(build_logging_config(level))
    logging.getLogger(__name__).debug("Logging configured")
