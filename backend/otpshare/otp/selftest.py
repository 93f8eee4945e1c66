from __future__ import annotations

from otpshare.otp.clock import current_step
from otpshare.otp.engine import Algorithm, generate_code

# RFC 4226 appendix D
HOTP_KEY = b"12345678901234567890"
HOTP_VECTORS = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]

# RFC 6238 appendix B (8 digits, 30 s step)
TOTP_KEYS = {
    Algorithm.SHA1: b"12345678901234567890",
    Algorithm.SHA256: b"12345678901234567890123456789012",
    Algorithm.SHA512: b"1234567890123456789012345678901234567890123456789012345678901234",
}
TOTP_VECTORS = [
    (59, Algorithm.SHA1, "94287082"),
    (59, Algorithm.SHA256, "46119246"),
    (59, Algorithm.SHA512, "90693936"),
    (1111111109, Algorithm.SHA1, "07081804"),
    (1111111109, Algorithm.SHA256, "68084774"),
    (1111111109, Algorithm.SHA512, "25091201"),
    (1111111111, Algorithm.SHA1, "14050471"),
    (1111111111, Algorithm.SHA256, "67062674"),
    (1111111111, Algorithm.SHA512, "99943326"),
    (1234567890, Algorithm.SHA1, "89005924"),
    (1234567890, Algorithm.SHA256, "91819424"),
    (1234567890, Algorithm.SHA512, "93441116"),
    (2000000000, Algorithm.SHA1, "69279037"),
    (2000000000, Algorithm.SHA256, "90698825"),
    (2000000000, Algorithm.SHA512, "38618901"),
    (20000000000, Algorithm.SHA1, "65353130"),
    (20000000000, Algorithm.SHA256, "77737706"),
    (20000000000, Algorithm.SHA512, "47863826"),
]


def main() -> None:
    for counter, expected in enumerate(HOTP_VECTORS):
        got = generate_code(HOTP_KEY, Algorithm.SHA1, 6, counter)
        assert got == expected, f'HOTP vector {counter} failed'

    for t, algo, expected in TOTP_VECTORS:
        got = generate_code(TOTP_KEYS[algo], algo, 8, current_step(t, 30))
        assert got == expected, f'TOTP vector {algo.value}@{t} failed'

    print('OK: TOTP selftest passed')


if __name__ == '__main__':
    main()
