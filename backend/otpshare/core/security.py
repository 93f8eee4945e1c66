from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from otpshare.core.config import settings
from otpshare.core.errors import Unauthenticated


def create_access_token(subject: str, expires_minutes: int | None = None, extra: dict | None = None) -> str:
    """Issue a bearer token for `subject` (development and tests; accounts live elsewhere)."""
    exp_min = settings.JWT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_min)).timestamp()),
    }
    if extra:
        payload.update(extra)

    return jwt.encode(
        payload,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict | None:
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None


_security = HTTPBearer(auto_error=False)


def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_security),
) -> str:
    """
    Dependency: verified caller id from `Authorization: Bearer <token>`.
    Raises Unauthenticated if the token is missing, invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    payload = decode_access_token(credentials.credentials)
    subject = payload.get("sub") if payload else None
    if not subject or not isinstance(subject, str):
        raise Unauthenticated()

    return subject
