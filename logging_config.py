"""
Centralized logging configuration for MtgProxySheet.

Page composition and PDF assembly run on worker threads while downloads
run on the event loop thread, so every record carries the thread name.

Log Format:
    2025-12-03 10:15:30 [INFO    ] [MainThread] mtg_proxy_sheet.content_cache - Cache: Pruned 3 cache entries
    2025-12-03 10:15:31 [DEBUG   ] [asyncio_0] mtg_proxy_sheet.pdf_generator - Creating page image

Usage:
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.DEBUG)
    logger = get_logger(__name__)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_LOGGER_NAME = "mtg_proxy_sheet"


class ThreadContextFilter(logging.Filter):
    """Adds `thread_name` to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        log_level: Minimum log level (default: INFO)
        log_file: Optional path of a rotating log file; console only if None

    Returns:
        The configured application logger
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)
        logger.info(f"File logging enabled: {log_file}")

    logger.debug(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the application namespace.

    Example:
        get_logger("content_cache") -> "mtg_proxy_sheet.content_cache"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
