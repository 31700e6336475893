"""Centralized logging configuration for the promise library and its demo CLI.

Library modules only ever call ``logging.getLogger(__name__)``; handlers and
levels are configured here by the application entry point.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path


class ColorFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        if record.levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"

        return super().format(record)


def setup_logging(
    level: str = "INFO", log_file: str | None = None, console: bool = True, colored: bool = True
) -> None:
    """Set up centralized logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file
        console: Whether to log to console
        colored: Whether to use colored console output
    """
    # Environment overrides
    level = os.getenv("LOG_LEVEL", level)
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_file = os.getenv("LOG_FILE", log_file) if log_to_file else log_file

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Only replace handlers this function installed earlier
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_conc_managed", False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(numeric_level)

    base_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)

        if colored and sys.stderr.isatty():
            formatter: logging.Formatter = ColorFormatter(base_format, date_format)
        else:
            formatter = logging.Formatter(base_format, date_format)

        console_handler.setFormatter(formatter)
        console_handler._conc_managed = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 10MB per file, 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(base_format, date_format))
        file_handler._conc_managed = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    # Reduce noise from asyncio debug mode
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger("src").setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Get a properly configured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
