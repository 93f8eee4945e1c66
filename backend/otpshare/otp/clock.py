"""Time-step arithmetic for TOTP windows."""
from __future__ import annotations

import time
from datetime import datetime, timezone

from otpshare.core.errors import InvalidInput


def unix_now() -> float:
    """Current Unix time, sub-second. Read once per request."""
    return time.time()


def _check(now: int | float, period_seconds: int) -> int:
    if isinstance(period_seconds, bool) or not isinstance(period_seconds, int) or period_seconds <= 0:
        raise InvalidInput("period_seconds must be a positive integer")
    if now < 0:
        raise InvalidInput("time must not be before the Unix epoch")
    return int(now)


def current_step(now: int | float, period_seconds: int) -> int:
    """Index of the time window containing `now`."""
    return _check(now, period_seconds) // period_seconds


def seconds_remaining(now: int | float, period_seconds: int) -> int:
    """Seconds until the next window boundary, always in [1, period_seconds]."""
    return period_seconds - _check(now, period_seconds) % period_seconds


def to_utc_datetime(now: int | float) -> datetime:
    """Naive UTC datetime for a Unix time, matching stored timestamps."""
    return datetime.fromtimestamp(now, timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC; mark them so clients do not read local time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
