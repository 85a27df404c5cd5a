"""Tests for logging setup."""

from __future__ import annotations

import pytest
import structlog

from pr_reviewer.core import logging as app_logging


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(app_logging, "_LOGGING_CONFIGURED", False)
    yield
    structlog.reset_defaults()


def test_setup_logging_configures_structlog_once(fresh_logging):
    app_logging.setup_logging(level="debug", json_logs=True)
    first = structlog.get_config()["processors"]

    app_logging.setup_logging(level="error", json_logs=False)

    assert app_logging._LOGGING_CONFIGURED
    assert structlog.is_configured()
    assert structlog.get_config()["processors"] is first
    assert isinstance(first[-1], structlog.processors.JSONRenderer)


def test_get_logger_accepts_keyword_context():
    with structlog.testing.capture_logs() as logs:
        app_logging.get_logger("pr_reviewer.test").info("hello", provider="openai")

    assert logs == [{"event": "hello", "provider": "openai", "log_level": "info"}]
