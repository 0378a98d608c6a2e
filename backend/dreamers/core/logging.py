"""
Logging setup for the story server.

Console output goes through colorlog; when LOG_TO_FILE is on, a rotating
JSON log is written as well so upstream calls can be grepped afterwards.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Any, Dict

from dreamers.core.config import Settings

_EXTRA_FIELDS = (
    "session_id",
    "character",
    "page_number",
    "status_code",
    "attempt",
    "prompt_length",
    "response_length",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def get_logging_config(settings: Settings) -> Dict[str, Any]:
    log_level = settings.LOG_LEVEL.upper()

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "colored": {
                "()": "colorlog.ColoredFormatter",
                "format": "%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "colored",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "dreamers": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            }
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIRECTORY, exist_ok=True)
        config["handlers"]["file_app"] = {
            "level": log_level,
            "class": "logging.handlers.RotatingFileHandler",
            "filename": os.path.join(settings.LOG_DIRECTORY, "app.log"),
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }
        config["loggers"]["dreamers"]["handlers"].append("file_app")
        config["root"]["handlers"].append("file_app")

    return config


def setup_logging(settings: Settings) -> None:
    logging.config.dictConfig(get_logging_config(settings))
    logging.getLogger("dreamers").info(
        "Logging configured (level=%s, to_file=%s)",
        settings.LOG_LEVEL,
        settings.LOG_TO_FILE,
    )


def truncate_text(text: str, max_length: int = 200) -> str:
    """Shorten long LLM text for log lines."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
