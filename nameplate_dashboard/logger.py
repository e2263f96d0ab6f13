# nameplate_dashboard/logger.py
"""
Process-wide logging setup.

Settings come from the environment when a logger is first requested:

- ``LOG_LEVEL``: level name, ``INFO`` by default
- ``LOG_DIR``: directory of the rotating ``nameplate.log``; an empty value
  keeps output on the console only
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
LOG_FILE_NAME = "nameplate.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(log_dir: str) -> Optional[RotatingFileHandler]:
    if not log_dir:
        return None
    os.makedirs(log_dir, exist_ok=True)
    return RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(_level_from_env())
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler(), _file_handler(os.getenv("LOG_DIR", "logs"))]
    for handler in handlers:
        if handler is None:
            continue
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
