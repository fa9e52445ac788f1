#!/usr/bin/env python3

import logging
import logging.config

from pythonjsonlogger import jsonlogger

STATUS_LOGGER = "tcx_backup.status"

GREEN = "\x1b[32m"
RED = "\x1b[31m"
YELLOW = "\x1b[33m"
RESET = "\x1b[0m"


class StatusColorFormatter(logging.Formatter):
    """Console formatter: status lines are green on success and red on error."""

    LEVEL_COLORS = {
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None and record.name == STATUS_LOGGER:
            color = GREEN
        if color is None:
            return message
        return f"{color}{message}{RESET}"


def setup_logging(level: str = "INFO", log_format: str = "console"):
    """Setup console or JSON logging configuration"""
    formatter = "json" if log_format == "json" else "console"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
            },
            "console": {
                "()": StatusColorFormatter,
                "format": "%(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
                "propagate": False
            },
            "minio": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            },
            "urllib3": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)
