"""Central logging configuration for the API and ingestion code."""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Optional


_CONFIGURED = False

_ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _logger_entry(level_name: str) -> dict:
    return {
        "level": level_name,
        "handlers": ["stdout"],
        "propagate": False,
    }


def configure_logging(default_level: Optional[str] = None) -> None:
    """Log to stdout with one formatter shared by the app, uvicorn and SQLAlchemy."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = (default_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    # SQL statements are only logged when DATABASE_ECHO is enabled
    sql_level = "INFO" if os.getenv("DATABASE_ECHO", "false").lower() == "true" else "WARNING"

    loggers = {name: _logger_entry(level_name) for name in _ROUTED_LOGGERS}
    loggers["sqlalchemy.engine"] = _logger_entry(sql_level)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": level_name,
                "handlers": ["stdout"],
            },
            "loggers": loggers,
        }
    )

    _CONFIGURED = True
