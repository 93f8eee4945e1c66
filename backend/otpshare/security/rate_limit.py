"""
Rate limiting for the public share lookup.
Slows down share token guessing using exponential backoff per client.
"""
import time
from threading import Lock

from otpshare.core.config import settings


class RateLimiter:
    """
    Simple in-memory rate limiter with exponential backoff.
    Tracks failed attempts per key (client address).
    """

    def __init__(self, max_attempts: int = 10, base_delay: float = 2.0, max_delay: float = 300.0):
        self._attempts: dict[str, dict] = {}
        self._lock = Lock()

        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def _required_delay(self, count: int) -> float:
        return min(self.base_delay * (2 ** (count - self.max_attempts)), self.max_delay)

    def _is_stale(self, entry: dict, now: float) -> bool:
        return now - entry["last_time"] > self.max_delay * 2

    def _evict_stale(self, now: float) -> None:
        for key in [k for k, entry in self._attempts.items() if self._is_stale(entry, now)]:
            del self._attempts[key]

    def is_allowed(self, key: str) -> bool:
        """
        Check if an attempt is allowed for this key.
        Returns False while a backoff period is active.
        """
        with self._lock:
            entry = self._attempts.get(key)
            if entry is None:
                return True
            now = time.time()

            if self._is_stale(entry, now):
                del self._attempts[key]
                return True

            if entry["count"] >= self.max_attempts:
                return now - entry["last_time"] >= self._required_delay(entry["count"])

            return True

    def record_attempt(self, key: str, success: bool = False) -> None:
        """Record an attempt (failed by default). Success clears the key."""
        with self._lock:
            if success:
                self._attempts.pop(key, None)
                return
            now = time.time()
            self._evict_stale(now)
            entry = self._attempts.setdefault(key, {"count": 0, "last_time": now})
            entry["last_time"] = now
            entry["count"] += 1

    def get_retry_after(self, key: str) -> float:
        """Seconds to wait before next attempt; 0 if allowed."""
        with self._lock:
            entry = self._attempts.get(key)
            if not entry or entry["count"] < self.max_attempts:
                return 0.0
            elapsed = time.time() - entry["last_time"]
            return max(0.0, self._required_delay(entry["count"]) - elapsed)

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()


# Global instance
_limiter = RateLimiter(
    max_attempts=settings.SHARE_LOOKUP_MAX_FAILURES,
    base_delay=settings.SHARE_LOOKUP_BASE_DELAY,
    max_delay=settings.SHARE_LOOKUP_MAX_DELAY,
)


def is_rate_limited(key: str) -> bool:
    """Check if a request should be rate limited."""
    return not _limiter.is_allowed(key)


def record_lookup_attempt(key: str, success: bool = False) -> None:
    _limiter.record_attempt(key, success=success)


def get_rate_limit_delay(key: str) -> float:
    """Get time to wait in seconds."""
    return _limiter.get_retry_after(key)


def reset_rate_limits() -> None:
    _limiter.reset()
