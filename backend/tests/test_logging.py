"""Tests for logging configuration."""
import logging

from otpshare.core.config import settings
from otpshare.core.logging_config import MaskShareTokens, setup_logging


def _access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        "uvicorn.access", logging.INFO, __file__, 1,
        '%s - "%s %s HTTP/%s" %d', ("127.0.0.1:50000", "GET", path, "1.1", 200), None,
    )


def test_share_token_masked_in_access_line():
    record = _access_record("/shared-totp?share_token=Zx9-abc_DEF&x=1")
    assert MaskShareTokens().filter(record)

    message = record.getMessage()
    assert "Zx9-abc_DEF" not in message
    assert "/shared-totp?share_token=***&x=1" in message


def test_other_records_untouched():
    record = _access_record("/secrets")
    assert MaskShareTokens().filter(record)
    assert record.args
    assert "/secrets" in record.getMessage()


def test_setup_logging_applies_level(monkeypatch):
    monkeypatch.setattr(settings, "log_level", "debug")
    monkeypatch.setattr(settings, "log_format", "json")
    setup_logging()

    assert logging.getLogger("otpshare").level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    handler = logging.getLogger("uvicorn.access").handlers[0]
    assert any(isinstance(f, MaskShareTokens) for f in handler.filters)
