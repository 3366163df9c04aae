"""
Logging setup for the offer engine.

Quote builders attach `document_type`, `quote_id` and `duration_ms` to their
INFO lines; the HTTP middleware adds the request fields. Both formatters
surface whichever of those a record carries.
"""
import json
import logging
import sys
from datetime import datetime, timezone

ENGINE_LOGGER = "tme-offers"

QUOTE_FIELDS = ("document_type", "quote_id", "duration_ms")
REQUEST_FIELDS = ("request_id", "http_method", "http_path", "http_status")

NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def record_fields(record: logging.LogRecord, names=QUOTE_FIELDS + REQUEST_FIELDS) -> dict:
    return {name: getattr(record, name) for name in names if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in deployed environments."""

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        payload.update(record_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # Dates and enums from quote data fall back to str()
        return json.dumps(payload, default=str)


class QuoteTextFormatter(logging.Formatter):
    """Human-readable lines with the quote context appended in brackets."""

    def __init__(self):
        super().__init__("%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    def format(self, record):
        line = super().format(record)
        context = record_fields(record, QUOTE_FIELDS)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def setup_logging(level: str = "INFO", json_output: bool = True) -> logging.Handler:
    """Install a single stdout handler on the root logger and set the engine level."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else QuoteTextFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.INFO)
    logging.getLogger(ENGINE_LOGGER).setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
