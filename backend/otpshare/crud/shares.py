# otpshare/crud/shares.py
from __future__ import annotations

import secrets
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from otpshare.core.records import ShareGrant
from otpshare.crud.totp_secrets import to_record
from otpshare.models.share import SharedSecret

TOKEN_BYTES = 32


def new_share_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def create_share(db: Session, secret_id: str, expires_at: datetime | None) -> SharedSecret:
    row = SharedSecret(
        secret_id=secret_id,
        share_token=new_share_token(),
        expires_at=expires_at,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_share(db: Session, share_id: str) -> SharedSecret | None:
    return db.get(SharedSecret, share_id)


def list_shares(db: Session, secret_id: str) -> list[SharedSecret]:
    stmt = (
        select(SharedSecret)
        .where(SharedSecret.secret_id == secret_id)
        .order_by(SharedSecret.created_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


def find_grant(db: Session, share_token: str) -> ShareGrant | None:
    """Exact token match; the grant's secret is resolved (None if orphaned)."""
    stmt = select(SharedSecret).where(SharedSecret.share_token == share_token)
    row = db.execute(stmt).scalar_one_or_none()
    if row is None:
        return None
    return ShareGrant(
        id=row.id,
        secret_id=row.secret_id,
        share_token=row.share_token,
        expires_at=row.expires_at,
        created_at=row.created_at,
        secret=to_record(row.secret) if row.secret is not None else None,
    )


def delete_share(db: Session, row: SharedSecret) -> None:
    db.delete(row)
    db.commit()


def purge_expired_shares(db: Session, at: datetime) -> int:
    stmt = delete(SharedSecret).where(
        SharedSecret.expires_at.is_not(None),
        SharedSecret.expires_at < at,
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount or 0
