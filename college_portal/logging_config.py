"""Process-wide logging configuration."""

import logging.config

from college_portal.config import get_settings


def build_logging_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "college_portal": {"level": level},
            "uvicorn.access": {"level": "WARNING"},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Install the console handler at ``level`` (defaults to ``LOG_LEVEL``)."""

    logging.config.dictConfig(build_logging_config((level or get_settings().log_level).upper()))
