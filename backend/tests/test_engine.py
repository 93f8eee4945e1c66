"""Tests for the one-time code engine."""
import hashlib

import pyotp
import pytest

from otpshare.core.errors import InvalidDigits, InvalidInput, InvalidKey, UnsupportedAlgorithm
from otpshare.otp.clock import current_step
from otpshare.otp.engine import Algorithm, decode_key, generate_code
from otpshare.otp.selftest import HOTP_KEY, HOTP_VECTORS, TOTP_KEYS, TOTP_VECTORS
from otpshare.otp import selftest

from conftest import TEST_KEY, TEST_SECRET_B32


@pytest.mark.parametrize("counter,expected", list(enumerate(HOTP_VECTORS)))
def test_rfc4226_vectors(counter, expected):
    assert generate_code(HOTP_KEY, Algorithm.SHA1, 6, counter) == expected


@pytest.mark.parametrize("t,algo,expected", TOTP_VECTORS)
def test_rfc6238_vectors(t, algo, expected):
    assert generate_code(TOTP_KEYS[algo], algo, 8, current_step(t, 30)) == expected


def test_known_answer_six_digits_at_fixed_time():
    # RFC 6238 SHA1 @ 59s is 94287082; six digits keep the low part
    assert generate_code(TEST_KEY, Algorithm.SHA1, 6, current_step(59, 30)) == "287082"


@pytest.mark.parametrize("algo,digest", [
    (Algorithm.SHA1, hashlib.sha1),
    (Algorithm.SHA256, hashlib.sha256),
    (Algorithm.SHA512, hashlib.sha512),
])
@pytest.mark.parametrize("digits", [6, 7, 8])
def test_matches_pyotp(algo, digest, digits):
    reference = pyotp.TOTP(TEST_SECRET_B32, digits=digits, digest=digest, interval=30)
    for t in (0, 29, 30, 1700000015, 2000000000):
        assert generate_code(TEST_KEY, algo, digits, current_step(t, 30)) == reference.at(t)


@pytest.mark.parametrize("algo,digest", [
    (Algorithm.SHA1, hashlib.sha1),
    (Algorithm.SHA256, hashlib.sha256),
    (Algorithm.SHA512, hashlib.sha512),
])
def test_matches_pyotp_hotp_large_counters(algo, digest):
    reference = pyotp.HOTP(TEST_SECRET_B32, digits=8, digest=digest)
    for counter in (0, 1, 2 ** 31, 2 ** 40, 2 ** 64 - 1):
        assert generate_code(TEST_KEY, algo, 8, counter) == reference.at(counter)


def test_fixed_width_zero_padded():
    # RFC 6238 SHA1 @ 1111111109 is 07081804: leading zero must survive
    code = generate_code(TOTP_KEYS[Algorithm.SHA1], Algorithm.SHA1, 8, current_step(1111111109, 30))
    assert code == "07081804"
    for counter in range(200):
        for digits in (6, 7, 8):
            code = generate_code(b"\x00\x01\x02", Algorithm.SHA256, digits, counter)
            assert len(code) == digits
            assert code.isdigit()


def test_deterministic():
    first = generate_code(TEST_KEY, "SHA512", 7, 123456)
    assert all(generate_code(TEST_KEY, "SHA512", 7, 123456) == first for _ in range(5))


def test_algorithm_name_is_case_insensitive():
    assert generate_code(TEST_KEY, "sha-256", 6, 1) == generate_code(TEST_KEY, Algorithm.SHA256, 6, 1)


def test_empty_key_rejected():
    with pytest.raises(InvalidKey):
        generate_code(b"", Algorithm.SHA1, 6, 0)


@pytest.mark.parametrize("algo", ["MD5", "SHA3", "", None])
def test_unsupported_algorithm(algo):
    with pytest.raises(UnsupportedAlgorithm):
        generate_code(TEST_KEY, algo, 6, 0)


@pytest.mark.parametrize("digits", [5, 9, 0, -6, True, "6"])
def test_invalid_digits(digits):
    with pytest.raises(InvalidDigits):
        generate_code(TEST_KEY, Algorithm.SHA1, digits, 0)


@pytest.mark.parametrize("counter", [-1, 2 ** 64])
def test_counter_out_of_range(counter):
    with pytest.raises(InvalidInput):
        generate_code(TEST_KEY, Algorithm.SHA1, 6, counter)


def test_max_counter_accepted():
    assert len(generate_code(TEST_KEY, Algorithm.SHA1, 6, 2 ** 64 - 1)) == 6


def test_decode_key_normalizes_input():
    assert decode_key(TEST_SECRET_B32) == TEST_KEY
    assert decode_key("gezd gnbv gy3t qojq gezd-gnbv gy3t qojq") == TEST_KEY
    # unpadded: 10 bytes -> 16 chars, 5 bytes -> 8 chars, 3 bytes -> 5 chars
    assert decode_key("JBSWY") == b"Hel"


@pytest.mark.parametrize("value", ["", "   ", "not base32!", "18181818", None])
def test_decode_key_rejects_garbage(value):
    with pytest.raises(InvalidKey):
        decode_key(value)


def test_selftest_passes(capsys):
    selftest.main()
    assert "OK" in capsys.readouterr().out
