"""Tests for root logger setup and request context injection."""

from __future__ import annotations

import logging

import pytest

from municipal_registry.core.logging import (
    HANDLER_NAME,
    RequestContextFilter,
    caller_var,
    configure_logging,
    correlation_id_var,
)


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def _record() -> logging.LogRecord:
    return logging.LogRecord("municipal_registry.test", logging.INFO, __file__, 1, "hello", None, None)


class TestConfigureLogging:

    def test_repeated_setup_keeps_one_handler(self, root_logger):
        configure_logging("DEBUG")
        installed = configure_logging("INFO")

        named = [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]
        assert named == [installed]
        assert root_logger.level == logging.INFO

    def test_foreign_handlers_are_kept(self, root_logger):
        foreign = logging.NullHandler()
        root_logger.addHandler(foreign)

        configure_logging()

        assert foreign in root_logger.handlers


class TestRequestContextFilter:

    def test_defaults_outside_request(self):
        record = _record()
        assert RequestContextFilter().filter(record)
        assert record.correlation_id == "-"
        assert record.caller == "-"

    def test_picks_up_context(self):
        cid_token = correlation_id_var.set("abc-123")
        caller_token = caller_var.set("city-works")
        try:
            record = _record()
            RequestContextFilter().filter(record)
        finally:
            correlation_id_var.reset(cid_token)
            caller_var.reset(caller_token)

        assert record.correlation_id == "abc-123"
        assert record.caller == "city-works"
