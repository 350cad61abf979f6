"""Tests for logging configuration."""

import logging
from pathlib import Path

import pytest

from idpdescriptor.core.logging import LogLevel, configure_logging, get_logger, parse_log_level


class TestParseLogLevel:
    """Tests for parse_log_level."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("debug", LogLevel.DEBUG),
            ("INFO", LogLevel.INFO),
            ("warn", LogLevel.WARNING),
            (" Error ", LogLevel.ERROR),
            (logging.WARNING, LogLevel.WARNING),
            (LogLevel.DEBUG, LogLevel.DEBUG),
        ],
    )
    def test_known(self, value: str | int, expected: LogLevel) -> None:
        assert parse_log_level(value) == expected

    @pytest.mark.parametrize("value", ["verbose", 7])
    def test_unknown_defaults_to_info(self, value: str | int) -> None:
        assert parse_log_level(value) == LogLevel.INFO


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level(self) -> None:
        logger = configure_logging("DEBUG")
        assert logger.name == "idpdescriptor"
        assert logger.level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self) -> None:
        configure_logging(LogLevel.INFO)
        logger = configure_logging(LogLevel.ERROR)
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.ERROR

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "idp.log"
        configure_logging("INFO", log_file=str(log_file))
        get_logger("test").info("descriptor served")
        for handler in logging.getLogger("idpdescriptor").handlers:
            handler.flush()
        content = log_file.read_text()
        assert "idpdescriptor.test - INFO - descriptor served" in content


def test_get_logger_namespace() -> None:
    """Module loggers live under the package logger."""
    assert get_logger("saml.metadata").name == "idpdescriptor.saml.metadata"
