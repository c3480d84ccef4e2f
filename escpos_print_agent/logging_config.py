"""
Centralized logging configuration for the print agent.

Flask serves each request on its own thread, so every record carries the
thread name. That makes it possible to follow one print request from the
route handler down to the spooler calls.

Log Format:
    2026-10-18 10:15:30 [INFO    ] [MainThread] escpos_print_agent.app - Agent starting
    2026-10-18 10:15:31 [INFO    ] [Thread-3] escpos_print_agent.session - Printer opened: EPSON TM-T20

Usage:
    from escpos_print_agent.logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, log_dir=None)
    logger = get_logger(__name__)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

APP_LOGGER = "escpos_print_agent"


class ThreadContextFilter(logging.Filter):
    """Adds ``thread_name`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the agent's logger.

    Args:
        log_level: Minimum level, as a number or a name such as "DEBUG"
        log_dir: Directory for rotating log files (None disables file logging)

    Returns:
        The configured application logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(APP_LOGGER)
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

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{APP_LOGGER}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{APP_LOGGER}_error.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.debug(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the application namespace."""
    if not name.startswith(APP_LOGGER):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
