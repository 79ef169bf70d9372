"""Tests for settings defaults and log formatting."""

import json
import logging
import sys

import pytest

from geotracker.config import Settings
from geotracker.logging_config import JsonFormatter, configure_logging


class TestSettings:

    def test_defaults(self, settings):
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.fetch_timeout_seconds == 8.0
        assert settings.max_html_chars == 400_000
        assert settings.max_pages == 5
        assert (settings.min_prompt_count, settings.default_prompt_count, settings.max_prompt_count) == (10, 30, 40)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAX_PAGES", "3")
        monkeypatch.setenv("LOG_JSON", "false")

        settings = Settings(_env_file=None)

        assert settings.max_pages == 3
        assert settings.log_json is False


class TestJsonFormatter:

    def test_formats_record_as_json(self):
        record = logging.LogRecord("geotracker.test", logging.WARNING, __file__, 1, "Fetch failed for %s", ("x",), None)

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "geotracker.test"
        assert data["message"] == "Fetch failed for x"
        assert "exception" not in data

    def test_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("geotracker", logging.ERROR, __file__, 1, "boom", (), sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: bad" in data["exception"]


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        root, app_logger = logging.getLogger(), logging.getLogger("geotracker")
        saved = (root.handlers[:], root.level, app_logger.handlers[:], app_logger.level, app_logger.propagate)
        yield
        root.handlers[:], root.level = saved[0], saved[1]
        app_logger.handlers[:], app_logger.level, app_logger.propagate = saved[2], saved[3], saved[4]

    def test_installs_handler(self):
        configure_logging(Settings(_env_file=None, log_level="debug"))

        app_logger = logging.getLogger("geotracker")
        assert app_logger.level == logging.DEBUG
        assert app_logger.propagate is False
        assert isinstance(app_logger.handlers[0].formatter, JsonFormatter)

    def test_plain_formatter(self):
        configure_logging(Settings(_env_file=None, log_json=False))

        handler = logging.getLogger("geotracker").handlers[0]
        assert not isinstance(handler.formatter, JsonFormatter)
