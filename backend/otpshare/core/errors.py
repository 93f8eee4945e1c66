"""
Error taxonomy for the TOTP service.

Every error carries the HTTP status and the public message used when it
reaches a response. Messages never contain key material.
"""
from __future__ import annotations


class OtpShareError(Exception):
    """Base class. Terminal for the current request."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(OtpShareError):
    status_code = 400
    default_message = "Invalid input"


class Unauthenticated(OtpShareError):
    status_code = 401
    default_message = "Invalid authentication credentials"


class Forbidden(OtpShareError):
    # Reported like a missing secret so ownership is not disclosed
    status_code = 404
    default_message = "Secret not found"


class NotFound(OtpShareError):
    status_code = 404
    default_message = "Not found"


class Expired(OtpShareError):
    status_code = 403
    default_message = "Share link has expired"


class RateLimited(OtpShareError):
    status_code = 429
    default_message = "Too many attempts"


class MalformedSecret(OtpShareError):
    """Stored secret data that cannot drive code generation."""

    status_code = 500
    default_message = "Stored secret is malformed"


class UnsupportedAlgorithm(MalformedSecret):
    pass


class InvalidDigits(MalformedSecret):
    pass


class InvalidKey(MalformedSecret):
    pass


class InternalError(OtpShareError):
    pass
