from .clock import as_utc, current_step, seconds_remaining, to_utc_datetime, unix_now, utcnow
from .engine import Algorithm, decode_key, generate_code

__all__ = [
    "Algorithm",
    "as_utc",
    "current_step",
    "decode_key",
    "generate_code",
    "seconds_remaining",
    "to_utc_datetime",
    "unix_now",
    "utcnow",
]
