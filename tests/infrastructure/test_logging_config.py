"""Unit tests for structured logging configuration."""

import json
import logging
import sys

import pytest

from health_itemtypes.infrastructure.logging_config import StructuredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestStructuredFormatter:
    """Test StructuredFormatter."""

    def test_json_fields(self):
        """Test that a record is rendered as JSON with its extra fields."""
        logger = logging.getLogger("health_itemtypes.test")
        record = logger.makeRecord(
            logger.name, logging.WARNING, __file__, 10, "Record %d rejected", (3,), None,
            extra={"record_index": 3, "thing_id": "abc"}
        )

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "health_itemtypes.test"
        assert data["message"] == "Record 3 rejected"
        assert data["record_index"] == 3
        assert data["thing_id"] == "abc"
        assert data["timestamp"].endswith("Z")
        assert "exception" not in data

    def test_exception_included(self):
        """Test that exception information is formatted."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("t").makeRecord(
                "t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        data = json.loads(StructuredFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestSetupLogging:
    """Test setup_logging."""

    def test_json_handler(self, restore_root_logger):
        """Test that JSON output installs the structured formatter."""
        setup_logging(use_json=True, log_level="debug")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_text_handler(self, restore_root_logger):
        """Test the human-readable development format."""
        setup_logging(use_json=False, log_level="WARNING")

        formatter = restore_root_logger.handlers[0].formatter
        assert not isinstance(formatter, StructuredFormatter)
        assert restore_root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        """Test that an unknown level name means INFO."""
        setup_logging(use_json=False, log_level="chatty")

        assert restore_root_logger.level == logging.INFO
