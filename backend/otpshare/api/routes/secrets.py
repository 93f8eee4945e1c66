from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from otpshare.core.errors import InternalError, OtpShareError
from otpshare.core.security import get_current_caller
from otpshare.crud import shares as shares_crud
from otpshare.crud import totp_secrets as secrets_crud
from otpshare.db.session import get_db
from otpshare.otp.clock import utcnow
from otpshare.schemas.secret import SecretCreate, SecretOut, SecretUpdate
from otpshare.schemas.share import ShareCreate, ShareOut, ShareSummary
from otpshare.services.secrets import get_owned_secret, get_owned_share

logger = logging.getLogger(__name__)

router = APIRouter(tags=['secrets'])


@router.post('/secrets', response_model=SecretOut, status_code=status.HTTP_201_CREATED)
def create_secret(
    payload: SecretCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    try:
        row = secrets_crud.create_secret(
            db,
            owner_id=caller_id,
            label=payload.label,
            issuer=payload.issuer,
            key_material=payload.key_material(),
            algorithm=payload.algorithm,
            digits=payload.digits,
            period_seconds=payload.period,
        )
    except OtpShareError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception('Failed to store secret')
        raise InternalError('Failed to store secret')

    logger.info('Secret %s created', row.id)
    return SecretOut.model_validate(row)


@router.get('/secrets', response_model=List[SecretOut])
def list_secrets(
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    """Caller's secrets, newest first."""
    return [SecretOut.model_validate(row) for row in secrets_crud.list_secrets(db, caller_id)]


@router.get('/secrets/{secret_id}', response_model=SecretOut)
def get_secret(
    secret_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    return SecretOut.model_validate(get_owned_secret(db, caller_id, secret_id))


@router.patch('/secrets/{secret_id}', response_model=SecretOut)
def update_secret(
    secret_id: str,
    payload: SecretUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    row = get_owned_secret(db, caller_id, secret_id)
    try:
        row = secrets_crud.update_secret(db, row, **payload.changes())
    except OtpShareError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception('Failed to update secret %s', secret_id)
        raise InternalError('Failed to update secret')
    return SecretOut.model_validate(row)


@router.delete('/secrets/{secret_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_secret(
    secret_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    """Delete a secret together with every share link pointing at it."""
    row = get_owned_secret(db, caller_id, secret_id)
    secrets_crud.delete_secret(db, row)
    logger.info('Secret %s deleted', secret_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post('/secrets/{secret_id}/shares', response_model=ShareOut, status_code=status.HTTP_201_CREATED)
def create_share(
    secret_id: str,
    payload: Optional[ShareCreate] = None,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    row = get_owned_secret(db, caller_id, secret_id)
    lifetime = (payload or ShareCreate()).lifetime()
    expires_at = utcnow() + lifetime if lifetime is not None else None

    share = shares_crud.create_share(db, row.id, expires_at)
    logger.info('Share grant %s created for secret %s (expires %s)', share.id, row.id, expires_at or 'never')
    return ShareOut.model_validate(share)


@router.get('/secrets/{secret_id}/shares', response_model=List[ShareSummary])
def list_shares(
    secret_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    row = get_owned_secret(db, caller_id, secret_id)
    return [ShareSummary.model_validate(s) for s in shares_crud.list_shares(db, row.id)]


@router.delete('/shares/{share_id}', status_code=status.HTTP_204_NO_CONTENT)
def revoke_share(
    share_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    """Revoke a share link; it stops working on the next lookup."""
    share = get_owned_share(db, caller_id, share_id)
    shares_crud.delete_share(db, share)
    logger.info('Share grant %s revoked', share_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
