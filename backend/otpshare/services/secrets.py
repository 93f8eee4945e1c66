from __future__ import annotations

from sqlalchemy.orm import Session

from otpshare.core.errors import NotFound
from otpshare.core.gate import authorize_owner_access
from otpshare.crud.shares import get_share
from otpshare.crud.totp_secrets import get_secret
from otpshare.models.secret import TotpSecret
from otpshare.models.share import SharedSecret


def get_owned_secret(db: Session, caller_id: str, secret_id: str) -> TotpSecret:
    """Secret row owned by the caller; missing and foreign secrets both answer 404."""
    row = get_secret(db, secret_id)
    if row is None:
        raise NotFound("Secret not found")
    authorize_owner_access(caller_id, row)
    return row


def get_owned_share(db: Session, caller_id: str, share_id: str) -> SharedSecret:
    row = get_share(db, share_id)
    if row is None or row.secret is None or row.secret.owner_id != caller_id:
        raise NotFound("Share link not found")
    return row
