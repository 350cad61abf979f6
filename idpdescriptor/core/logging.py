"""Logging setup for metadata generation.

Log levels:
- ERROR: Only log failures (bad configuration, unreadable certificates)
- WARNING: Also log recoverable problems (invalid config file, fallbacks)
- INFO: Log descriptors served and files written
- DEBUG: Log the inputs each descriptor was generated from
"""

from __future__ import annotations

import logging
from enum import IntEnum

# Root logger for the package
logger = logging.getLogger("idpdescriptor")


class LogLevel(IntEnum):
    """Supported logging levels."""

    ERROR = logging.ERROR  # 40
    WARNING = logging.WARNING  # 30
    INFO = logging.INFO  # 20
    DEBUG = logging.DEBUG  # 10


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_log_level(level: LogLevel | str | int) -> LogLevel:
    """Parse a log level from its name or numeric value.

    Unknown names fall back to INFO.

    Args:
        level: LogLevel, level name (case-insensitive) or numeric level.

    Returns:
        The matching LogLevel.
    """
    if isinstance(level, LogLevel):
        return level
    if isinstance(level, int):
        try:
            return LogLevel(level)
        except ValueError:
            return LogLevel.INFO
    level_map = {
        "ERROR": LogLevel.ERROR,
        "WARNING": LogLevel.WARNING,
        "WARN": LogLevel.WARNING,
        "INFO": LogLevel.INFO,
        "DEBUG": LogLevel.DEBUG,
    }
    return level_map.get(level.strip().upper(), LogLevel.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package namespace.

    Args:
        name: Dotted suffix, e.g. "saml.metadata".

    Returns:
        Logger named "idpdescriptor.<name>".
    """
    return logger.getChild(name)


def configure_logging(
    level: LogLevel | str | int = LogLevel.INFO,
    log_file: str | None = None,
) -> logging.Logger:
    """Configure package logging.

    Replaces any handlers previously installed on the package logger, so
    calling it twice does not duplicate output.

    Args:
        level: Log level (ERROR, WARNING, INFO, DEBUG) or string name.
        log_file: Optional file path to write logs to.

    Returns:
        The configured package logger.
    """
    level = parse_log_level(level)

    logger.setLevel(level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured at {level.name}")
    return logger
