"""Tests for logging utility."""

import logging
from io import StringIO


class TestLoggerConfiguration:
    """Test that the logger configures correctly."""

    def test_configure_logging_creates_logger(self):
        """configure_logging should return the application logger."""
        from src.utils.logging import configure_logging

        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "talent_match"

    def test_configure_logging_respects_level(self):
        """Logger should respect the configured log level."""
        from src.utils.logging import configure_logging

        logger = configure_logging(level="DEBUG")
        assert logger.level == logging.DEBUG

        logger = configure_logging(level="WARNING")
        assert logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in logger.handlers)

    def test_configure_logging_default_level_is_info(self):
        """Default log level should be INFO."""
        from src.utils.logging import configure_logging

        logger = configure_logging()
        assert logger.level == logging.INFO

    def test_repeated_configuration_keeps_one_handler(self):
        """Calling configure_logging twice should not stack handlers."""
        from src.utils.logging import configure_logging

        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1
        assert logger.propagate is False


class TestLogOutput:
    """Test that log output format is correct."""

    def test_log_message_includes_level_and_name(self):
        """Log messages should include the level and logger name."""
        from src.utils.logging import configure_logging, get_logger

        logger = configure_logging(level="INFO")

        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        get_logger("matching.service").warning("Project not found: p1")

        output = buffer.getvalue()
        assert "WARNING" in output
        assert "talent_match.matching.service" in output
        assert "Project not found: p1" in output


class TestGetLogger:
    """Test the get_logger convenience function."""

    def test_get_logger_returns_child_logger(self):
        """get_logger should return a child of the main logger."""
        from src.utils.logging import get_logger

        logger = get_logger("matching.fetcher")
        assert logger.name == "talent_match.matching.fetcher"
        assert logger.parent is logging.getLogger("talent_match")


class TestResetLogging:
    """Test reset_logging."""

    def test_reset_clears_handlers(self):
        """reset_logging removes handlers and allows reconfiguration."""
        from src.utils.logging import configure_logging, reset_logging

        logger = configure_logging()
        reset_logging()

        assert logger.handlers == []
        assert logger.propagate is True
