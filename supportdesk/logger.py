"""
Logging Configuration Module

Centralized logging for the server and the CLI. Log records go to stderr so
that CLI answers printed on stdout stay clean; an optional file handler adds
function and line information.

Usage:
    from supportdesk.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Serving warranty text from cache")
"""

import copy
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

# HTTP client libraries log every connection at DEBUG
QUIET_LOGGERS: Tuple[str, ...] = ("urllib3", "httpx", "httpcore")


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name for terminal output."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers share the record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelno, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    use_colors: bool = True,
    quiet: Tuple[str, ...] = QUIET_LOGGERS,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        use_colors: Colour level names when stderr is a terminal
        quiet: Loggers held at WARNING or above regardless of level
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    if use_colors and sys.stderr.isatty():
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module (usually ``__name__``)."""
    return logging.getLogger(name)


_initialized = False


def init_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    Initialize logging from settings. Call once at application startup.

    Args:
        level: Overrides the configured level (the CLI's --verbose)
        force: Reconfigure even if logging was already initialized
    """
    global _initialized
    if _initialized and not force:
        return

    from supportdesk.config import settings
    setup_logging(
        level=level or settings.logging.level,
        log_file=settings.logging.file,
    )

    _initialized = True
