"""Core metadata generation, configuration and logging."""

from idpdescriptor.core.logging import (
    LogLevel,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
]
