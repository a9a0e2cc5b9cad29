"""Central logging configuration for the application.

Applies a root stdout handler so all module loggers emit INFO-level logs
without per-module setup. Uvicorn loggers share the same handler; duplicate
handlers are avoided on reloads.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig


def _level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
            # Statement echo is too noisy for request logs
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging() -> None:
    """Configure application-wide logging once.

    If the root logger already has handlers (pytest, reloaders), leave it alone
    to prevent duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    dictConfig(_dict_config(_level()))
