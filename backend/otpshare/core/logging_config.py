"""
Process-wide logging.

Share tokens are bearer credentials and arrive in the query string of
/shared-totp, so every console record passes through MaskShareTokens.
"""
from __future__ import annotations

import logging
import logging.config
import re

from otpshare.core.config import settings

_SHARE_TOKEN = re.compile(r"(share_token=)[^&\s\"']+")

_FORMATS = {
    "text": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    "json": '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
}


class MaskShareTokens(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _SHARE_TOKEN.sub(r"\1***", message)
        if masked != message:
            record.msg, record.args = masked, ()
        return True


def setup_logging() -> None:
    """Console logging at settings.log_level, `text` or `json` lines."""
    level = settings.log_level.upper()
    fmt = _FORMATS.get(settings.log_format, _FORMATS["text"])

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"mask_share_tokens": {"()": MaskShareTokens}},
        "formatters": {"line": {"format": fmt}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "line",
                "filters": ["mask_share_tokens"],
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "otpshare": {"level": level},
            # uvicorn's access log carries full request paths
            "uvicorn.access": {"handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
