# otpshare/crypto/vault.py
from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from otpshare.core.config import settings
from otpshare.core.errors import InvalidKey

KEY_LEN = 32
NONCE_LEN = 12
_HKDF_INFO = b"otpshare/key-material/v1"


@lru_cache(maxsize=1)
def _vault_key() -> bytes:
    """
    AES-256 key protecting stored key material.

    KEY_ENCRYPTION_KEY (base64) wins; otherwise it is derived from JWT_SECRET.
    """
    if settings.KEY_ENCRYPTION_KEY:
        try:
            key = base64.b64decode(settings.KEY_ENCRYPTION_KEY, validate=True)
        except binascii.Error:
            raise RuntimeError("KEY_ENCRYPTION_KEY is not valid base64")
        if len(key) != KEY_LEN:
            raise RuntimeError("KEY_ENCRYPTION_KEY must decode to 32 bytes")
        return key
    return HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_LEN,
        salt=None,
        info=_HKDF_INFO,
    ).derive(settings.JWT_SECRET.encode("utf-8"))


def reset_vault_key() -> None:
    """Forget the cached key (settings changed)."""
    _vault_key.cache_clear()


def seal(key_material: bytes, aad: bytes) -> bytes:
    """Encrypt key material; returns nonce + ciphertext."""
    nonce = os.urandom(NONCE_LEN)
    return nonce + AESGCM(_vault_key()).encrypt(nonce, key_material, aad)


def unseal(blob: bytes, aad: bytes) -> bytes:
    if not blob or len(blob) < NONCE_LEN + 16:
        raise InvalidKey("Stored key material is truncated")
    try:
        return AESGCM(_vault_key()).decrypt(blob[:NONCE_LEN], blob[NONCE_LEN:], aad)
    except InvalidTag:
        raise InvalidKey("Stored key material cannot be decrypted")
