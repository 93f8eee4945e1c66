"""
Keyed-hash one-time codes (RFC 4226 HOTP, driven by RFC 6238 time steps).

Pure functions, no shared state: safe to call from any number of
request threads concurrently.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
from enum import Enum

import pyotp

from otpshare.core.errors import InvalidDigits, InvalidInput, InvalidKey, UnsupportedAlgorithm

MIN_DIGITS = 6
MAX_DIGITS = 8
MAX_COUNTER = 2 ** 64 - 1


class Algorithm(str, Enum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def resolve_algorithm(algorithm: Algorithm | str) -> Algorithm:
    """Accepts an Algorithm or its name in any case ("sha256", "SHA-256")."""
    if isinstance(algorithm, Algorithm):
        return algorithm
    if isinstance(algorithm, str):
        name = algorithm.strip().upper().replace("-", "")
        try:
            return Algorithm(name)
        except ValueError:
            pass
    raise UnsupportedAlgorithm(f"Unsupported algorithm: {algorithm!r}")


def decode_key(external: str) -> bytes:
    """
    Decode a base32 secret as typed by a user or shown by an issuer.

    Spaces and hyphens are ignored, case does not matter and padding is
    optional. Raises InvalidKey when nothing usable remains.
    """
    if not isinstance(external, str):
        raise InvalidKey("Secret must be a base32 string")
    normalized = external.replace(" ", "").replace("-", "").strip().upper().rstrip("=")
    if not normalized:
        raise InvalidKey("Secret is empty")
    try:
        key = pyotp.OTP(normalized).byte_secret()
    except (binascii.Error, ValueError):
        raise InvalidKey("Secret is not valid base32")
    if not key:
        raise InvalidKey("Secret is empty")
    return key


def generate_code(key_material: bytes, algorithm: Algorithm | str, digits: int, counter: int) -> str:
    """
    Derive the code for one counter value (RFC 4226 HOTP).

    The counter is the TOTP time step for time-based codes. The result is
    always exactly `digits` characters, left zero-padded.
    """
    if not isinstance(key_material, (bytes, bytearray)) or not key_material:
        raise InvalidKey("Key material is empty")
    algo = resolve_algorithm(algorithm)
    if isinstance(digits, bool) or not isinstance(digits, int) or not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigits(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}")
    if isinstance(counter, bool) or not isinstance(counter, int) or not 0 <= counter <= MAX_COUNTER:
        raise InvalidInput("counter must be a non-negative 64-bit integer")

    hotp = pyotp.HOTP(
        base64.b32encode(bytes(key_material)).decode("ascii"),
        digits=digits,
        digest=_DIGESTS[algo],
    )
    return hotp.at(counter)
