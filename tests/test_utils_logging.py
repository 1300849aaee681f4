"""
Unit tests for logging configuration (logging_config.py).
"""
import json
import logging
import pytest

from src.exam_tutor.utils.logging_config import ConsoleFormatter, JSONFormatter, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(message="Quiz generated", level=logging.INFO):
    return logging.LogRecord(
        name="src.exam_tutor.core.generator",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestFormatters:
    """Test log formatters."""

    def test_json_formatter(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "src.exam_tutor.core.generator"
        assert data["message"] == "Quiz generated"
        assert data["line"] == 42

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            import sys
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad payload" in data["exception"]

    def test_console_formatter(self):
        formatted = ConsoleFormatter().format(make_record(level=logging.WARNING))

        assert "[WARNING]" in formatted
        assert "src.exam_tutor.core.generator:42 - Quiz generated" in formatted
        assert ConsoleFormatter.COLORS["WARNING"] in formatted


@pytest.mark.unit
class TestSetupLogging:
    """Test root logger configuration."""

    def test_console_handler(self, root_logger):
        setup_logging("debug")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_json_handler(self, root_logger):
        setup_logging("ERROR", json_format=True)

        assert root_logger.level == logging.ERROR
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
