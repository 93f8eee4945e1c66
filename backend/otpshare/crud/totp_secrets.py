# otpshare/crud/totp_secrets.py
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from otpshare.core.errors import InvalidInput, UnsupportedAlgorithm
from otpshare.core.records import SecretRecord
from otpshare.crypto.vault import seal, unseal
from otpshare.models.secret import TotpSecret
from otpshare.otp.engine import MAX_DIGITS, MIN_DIGITS, Algorithm, resolve_algorithm

MIN_PERIOD = 15
MAX_PERIOD = 120


def _aad(secret_id: str) -> bytes:
    return f"totp_secret:{secret_id}".encode("utf-8")


def _check_params(digits: int, period_seconds: int) -> None:
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidInput(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}")
    if not MIN_PERIOD <= period_seconds <= MAX_PERIOD:
        raise InvalidInput(f"period must be between {MIN_PERIOD} and {MAX_PERIOD} seconds")


def to_record(row: TotpSecret) -> SecretRecord:
    """Build the generation-time view; decrypts the key material."""
    return SecretRecord(
        id=row.id,
        owner_id=row.owner_id,
        label=row.label,
        issuer=row.issuer,
        key_material=unseal(row.key_material_enc, _aad(row.id)),
        algorithm=resolve_algorithm(row.algorithm),
        digits=row.digits,
        period_seconds=row.period_seconds,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def get_secret(db: Session, secret_id: str) -> TotpSecret | None:
    return db.get(TotpSecret, secret_id)


def list_secrets(db: Session, owner_id: str) -> list[TotpSecret]:
    stmt = (
        select(TotpSecret)
        .where(TotpSecret.owner_id == owner_id)
        .order_by(TotpSecret.created_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


def create_secret(
    db: Session,
    owner_id: str,
    label: str,
    key_material: bytes,
    issuer: str | None = None,
    algorithm: Algorithm | str = Algorithm.SHA1,
    digits: int = 6,
    period_seconds: int = 30,
) -> TotpSecret:
    if not label or not label.strip():
        raise InvalidInput("Label cannot be empty")
    if not key_material:
        raise InvalidInput("Secret cannot be empty")
    try:
        algo = resolve_algorithm(algorithm)
    except UnsupportedAlgorithm as e:
        raise InvalidInput(e.message)
    _check_params(digits, period_seconds)

    secret_id = str(uuid.uuid4())
    row = TotpSecret(
        id=secret_id,
        owner_id=owner_id,
        label=label,
        issuer=issuer or None,
        key_material_enc=seal(key_material, _aad(secret_id)),
        algorithm=algo.value,
        digits=digits,
        period_seconds=period_seconds,
    )

    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_secret(db: Session, row: TotpSecret, **changes) -> TotpSecret:
    """Apply metadata changes. Key material is not updatable."""
    if "label" in changes:
        label = changes["label"]
        if not label or not label.strip():
            raise InvalidInput("Label cannot be empty")
        row.label = label
    if "issuer" in changes:
        row.issuer = changes["issuer"] or None
    if "algorithm" in changes:
        try:
            row.algorithm = resolve_algorithm(changes["algorithm"]).value
        except UnsupportedAlgorithm as e:
            raise InvalidInput(e.message)

    digits = changes.get("digits", row.digits)
    period_seconds = changes.get("period_seconds", row.period_seconds)
    _check_params(digits, period_seconds)
    row.digits = digits
    row.period_seconds = period_seconds

    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_secret(db: Session, row: TotpSecret) -> None:
    # share grants go with it (ORM cascade + ON DELETE CASCADE)
    db.delete(row)
    db.commit()
