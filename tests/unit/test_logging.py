"""Unit tests for logging setup."""

import json
import logging

import pytest
import structlog

from nativefier.core.config import Config
from nativefier.core.logging import bind_context, clear_context, get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    clear_context()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def events(text):
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_events_carry_logger_level_and_context(self, capsys):
        setup_logging(Config(log_level="INFO"), json_logs=True)
        bind_context(run_id="abc123")

        get_logger("nativefier.tests").info("stage done", stage="icons")
        get_logger("nativefier.tests").debug("hidden")

        (event,) = events(capsys.readouterr().err)
        assert event["event"] == "stage done"
        assert event["stage"] == "icons"
        assert event["level"] == "info"
        assert event["logger"] == "nativefier.tests"
        assert event["run_id"] == "abc123"
        assert "timestamp" in event

    def test_standard_library_records_share_the_handler(self, capsys):
        setup_logging(Config(log_level="DEBUG"), json_logs=True)

        logging.getLogger("nativefier.tests.stdlib").warning("plain %s", "record")

        (event,) = events(capsys.readouterr().err)
        assert event["event"] == "plain record"
        assert event["level"] == "warning"

    def test_repeated_setup_keeps_one_handler(self):
        setup_logging(json_logs=False)
        setup_logging(json_logs=False)

        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
