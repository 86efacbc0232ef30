"""
Tests for logging configuration
"""

import json
import logging

import pytest
import structlog

from datamonitor.log_config import build_formatter, setup_logging
from datamonitor.validator.monitor import DataMonitor


@pytest.fixture
def restore_root_logger():
    """Put pytest's handlers back after setup_logging replaces them."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def make_record(**extra):
    record = logging.makeLogRecord({
        "name": "datamonitor.findings",
        "levelno": logging.WARNING,
        "levelname": "WARNING",
        "msg": "DATA_DRIFT: 2 value(s) of 'color' not seen at fit time: ['blue']",
    })
    record.__dict__.update(extra)
    return record


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_single_stdout_handler(self, restore_root_logger):
        """The root logger gets exactly one structlog-rendered handler."""
        setup_logging(level="DEBUG", fmt="console")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(
            restore_root_logger.handlers[0].formatter,
            structlog.stdlib.ProcessorFormatter,
        )

    def test_environment_defaults(self, restore_root_logger, monkeypatch):
        """LOG_LEVEL is used when no level is given."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        setup_logging()

        assert restore_root_logger.level == logging.ERROR

    def test_findings_rendered_as_json(self, capsys, restore_root_logger):
        """Drift findings reach stdout as JSON with their fields."""
        setup_logging(level="INFO", fmt="json")

        monitor = DataMonitor().fit({"color": ["red"]})
        monitor.validate({"color": ["blue", "blue"]})

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        drift = [line for line in lines if line["logger"] == "datamonitor.findings"]
        assert len(drift) == 1
        assert drift[0]["level"] == "warning"
        assert drift[0]["kind"] == "UnknownCategory"
        assert drift[0]["feature"] == "color"
        assert drift[0]["count"] == 2
        assert drift[0]["values"] == ["blue"]
        assert drift[0]["event"].startswith("DATA_DRIFT: ")


class TestBuildFormatter:
    """Tests for record rendering."""

    def test_json_includes_extra_fields(self):
        """Extra record attributes become JSON keys."""
        output = build_formatter("json").format(make_record(feature="color", count=2))

        payload = json.loads(output)
        assert payload["logger"] == "datamonitor.findings"
        assert payload["feature"] == "color"
        assert payload["count"] == 2
        assert "timestamp" in payload

    def test_console_includes_extra_fields(self):
        """Console output carries the event and key-value fields."""
        output = build_formatter("console").format(make_record(feature="color", count=2))

        assert "DATA_DRIFT" in output
        assert "feature=color" in output
        assert "count=2" in output
