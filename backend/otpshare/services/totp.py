"""
One-shot request handlers: access check, record lookup, code and window.

`now` is captured once per call and used for the expiry check, the
counter and the remaining seconds alike.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from otpshare.core.errors import InvalidInput
from otpshare.core.gate import authorize_share_access
from otpshare.core.records import SecretRecord
from otpshare.crud.shares import find_grant
from otpshare.crud.totp_secrets import to_record
from otpshare.otp.clock import current_step, seconds_remaining, to_utc_datetime, unix_now
from otpshare.otp.engine import generate_code
from otpshare.schemas.totp import SharedTotpOut, TotpCodeOut
from otpshare.services.secrets import get_owned_secret

logger = logging.getLogger(__name__)


def _current_code(record: SecretRecord, now: float) -> tuple[str, int]:
    counter = current_step(now, record.period_seconds)
    code = generate_code(record.key_material, record.algorithm, record.digits, counter)
    return code, seconds_remaining(now, record.period_seconds)


def generate_for_owner(db: Session, caller_id: str, secret_id: str, now: Optional[float] = None) -> TotpCodeOut:
    if not secret_id:
        raise InvalidInput("secret_id is required")
    now = unix_now() if now is None else now

    # ownership is settled on the stored row before any key is decrypted
    record = to_record(get_owned_secret(db, caller_id, secret_id))

    code, expires_in = _current_code(record, now)
    logger.debug("Generated code for secret %s", record.id)
    return TotpCodeOut(
        code=code,
        label=record.label,
        issuer=record.issuer,
        expires_in=expires_in,
        algorithm=record.algorithm,
        digits=record.digits,
    )


def generate_for_share(db: Session, share_token: str, now: Optional[float] = None) -> SharedTotpOut:
    if not share_token:
        raise InvalidInput("share_token is required")
    now = unix_now() if now is None else now

    grant = authorize_share_access(share_token, lambda token: find_grant(db, token), to_utc_datetime(now))
    record = grant.secret

    code, expires_in = _current_code(record, now)
    logger.debug("Generated code for share grant %s", grant.id)
    return SharedTotpOut(
        code=code,
        label=record.label,
        issuer=record.issuer,
        expires_in=expires_in,
        share_expires_at=grant.expires_at,
    )
