"""Tests for structlog configuration."""

from __future__ import annotations

import json

import pytest

from sqlnaming.core.logging import LogContext, clear_context, configure_logging, get_logger


class TestConfigureLogging:
    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD")

    def test_json_to_stderr(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("sqlnaming.test").info("file_parsed", statements=3)
        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "file_parsed"
        assert event["statements"] == 3
        assert event["level"] == "info"
        assert event["logger_name"] == "sqlnaming.test"
        assert event["service"] == "sqlnaming"

    def test_module_logger_created_before_configure(self, capsys):
        logger = get_logger("sqlnaming.early")
        configure_logging(level="INFO", json_format=True)
        logger.info("late_event")
        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "late_event"
        assert event["logger_name"] == "sqlnaming.early"

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("sqlnaming.test").debug("hidden")
        assert "hidden" not in capsys.readouterr().err


class TestLogContext:
    def test_binds_and_unbinds(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        logger = get_logger("sqlnaming.test")
        with LogContext(path="schema.sql"):
            logger.info("inside")
        logger.info("outside")
        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        inside = next(e for e in lines if e["event"] == "inside")
        outside = next(e for e in lines if e["event"] == "outside")
        assert inside["path"] == "schema.sql"
        assert "path" not in outside
        clear_context()
