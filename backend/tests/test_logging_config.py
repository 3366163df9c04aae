"""
test_logging_config.py — Unit tests for the engine's log formatting.

Tests cover:
  - JSON lines carry quote and request fields when present
  - Non-JSON values (dates) are stringified
  - Text lines append the quote context
  - setup_logging installs one handler and sets the engine level
"""

import datetime
import json
import logging

import pytest

from offer_engine.services.logging_config import (
    ENGINE_LOGGER,
    JSONFormatter,
    QuoteTextFormatter,
    setup_logging,
)


def _record(msg="Built offer", **extra):
    record = logging.LogRecord("tme-offers.quotes", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    engine = logging.getLogger(ENGINE_LOGGER)
    saved = (list(root.handlers), root.level, engine.level)
    yield
    root.handlers, root.level = saved[0], saved[1]
    engine.setLevel(saved[2])


# ===========================================================================
# Formatters
# ===========================================================================

class TestJSONFormatter:

    def test_quote_fields(self):
        line = JSONFormatter().format(_record(document_type="offer", quote_id="250307 X.pdf", duration_ms=1.5))
        payload = json.loads(line)
        assert payload["message"] == "Built offer"
        assert payload["logger"] == "tme-offers.quotes"
        assert payload["document_type"] == "offer"
        assert payload["quote_id"] == "250307 X.pdf"
        assert payload["duration_ms"] == 1.5

    def test_absent_fields_omitted(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert "document_type" not in payload
        assert "request_id" not in payload

    def test_dates_stringified(self):
        payload = json.loads(JSONFormatter().format(_record(quote_id=datetime.date(2025, 3, 7))))
        assert payload["quote_id"] == "2025-03-07"


class TestQuoteTextFormatter:

    def test_context_appended(self):
        line = QuoteTextFormatter().format(_record(document_type="taxation", quote_id="ACME"))
        assert line.endswith("Built offer [document_type=taxation quote_id=ACME]")

    def test_plain_line(self):
        line = QuoteTextFormatter().format(_record())
        assert line.endswith("INFO: Built offer")


# ===========================================================================
# setup_logging
# ===========================================================================

class TestSetupLogging:

    def test_json_handler(self, restore_logging):
        handler = setup_logging(level="debug", json_output=True)
        assert logging.getLogger().handlers == [handler]
        assert isinstance(handler.formatter, JSONFormatter)
        assert logging.getLogger(ENGINE_LOGGER).level == logging.DEBUG

    def test_text_handler_and_unknown_level(self, restore_logging):
        handler = setup_logging(level="verbose", json_output=False)
        assert isinstance(handler.formatter, QuoteTextFormatter)
        assert logging.getLogger(ENGINE_LOGGER).level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
