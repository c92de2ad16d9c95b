"""
Logging setup for applications using fileio handles.

Records carry the emitting module (``fileio.file``, ``fileio.cache`` ...) so
adapter I/O and cache timer activity can be told apart in one log.
"""

import logging
import sys
from pathlib import Path

from .config import LogConfig

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(name)s - %(message)s"

# Emits a DEBUG record per store, extend, timer arm and expiry
CACHE_LOGGER = "fileio.cache"


def _attach(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def setup_logging(config: LogConfig) -> logging.Logger:
    """
    Configure root handlers for fileio logging.

    A FileHandler is added when config.file is set (parent directories are
    created), and a stderr StreamHandler when config.console is True.
    Existing root handlers are replaced. With cache_events off, the
    fileio.cache logger is held at INFO so timer chatter stays out of a
    DEBUG log while adapter operations are still recorded.

    Returns:
        The ``fileio`` package logger.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _attach(root, logging.FileHandler(log_path, mode="a", encoding="utf-8"), level)

    if config.console:
        _attach(root, logging.StreamHandler(sys.stderr), level)

    cache_logger = logging.getLogger(CACHE_LOGGER)
    cache_logger.setLevel(logging.NOTSET if config.cache_events else max(level, logging.INFO))

    return logging.getLogger("fileio")
