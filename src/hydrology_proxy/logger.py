"""
Logging configuration for the hydrology proxy.

One application logger ("hydrology_proxy") writes to the console and to a
file. Bulk requests fan out over worker threads, so file records carry the
thread name. The web server's own loggers (werkzeug, flask.app) can be
routed to the same handlers with attach_handlers.
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterable, Optional


APP_LOGGER = "hydrology_proxy"
DEFAULT_LOG_FILE = "logs/hydrology_proxy.log"
SERVER_LOGGERS = ("werkzeug", "flask.app")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(filename)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = APP_LOGGER,
    log_file: Optional[str] = None,
    log_level: str = "INFO"
) -> logging.Logger:
    """
    Set up the application logger with console and file handlers.

    Args:
        name: Logger name
        log_file: Path to log file. If None, uses LOG_FILE env var or the default
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Re-running setup replaces handlers; the old file handle is released
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def attach_handlers(logger: logging.Logger, names: Iterable[str] = SERVER_LOGGERS) -> None:
    """Send records of other loggers (the web server's by default) to logger's handlers."""
    for name in names:
        target = logging.getLogger(name)
        for handler in list(target.handlers):
            if handler not in logger.handlers:
                target.removeHandler(handler)
        for handler in logger.handlers:
            if handler not in target.handlers:
                target.addHandler(handler)
        target.propagate = False


class LoggerContext:
    """Time an operation and log its start, completion or failure."""

    def __init__(self, logger: logging.Logger, operation: str):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the operation being logged
        """
        self.logger = logger
        self.operation = operation
        self.duration: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.monotonic()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.monotonic() - self._started

        if exc_type is not None:
            self.logger.error(
                f"Failed {self.operation} after {self.duration:.2f}s: {exc_val}",
                exc_info=True
            )
            return False

        self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s")
        return False
