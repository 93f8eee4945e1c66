from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from otpshare.core.errors import InternalError, InvalidInput, NotFound, OtpShareError, RateLimited
from otpshare.core.security import get_current_caller
from otpshare.db.session import get_db
from otpshare.schemas.totp import SharedTotpOut, TotpCodeOut
from otpshare.security.rate_limit import get_rate_limit_delay, is_rate_limited, record_lookup_attempt
from otpshare.services.totp import generate_for_owner, generate_for_share

logger = logging.getLogger(__name__)

router = APIRouter(tags=['totp'])


@router.get('/generate-totp', response_model=TotpCodeOut)
def generate_totp(
    secret_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_current_caller),
):
    """Current code for one of the caller's secrets."""
    if not secret_id or not secret_id.strip():
        raise InvalidInput('secret_id is required')

    try:
        return generate_for_owner(db, caller_id, secret_id.strip())
    except OtpShareError:
        raise
    except Exception:
        logger.exception('TOTP generation failed for secret %s', secret_id)
        raise InternalError('Failed to generate TOTP')


@router.get('/shared-totp', response_model=SharedTotpOut)
def shared_totp(
    request: Request,
    share_token: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Current code through a share link. No caller identity; the response
    carries label, issuer, code and expiry only.
    """
    if not share_token or not share_token.strip():
        raise InvalidInput('share_token is required')

    client_key = f"share_{request.client.host if request.client else 'unknown'}"
    if is_rate_limited(client_key):
        delay = get_rate_limit_delay(client_key)
        raise RateLimited(f'Too many share lookups. Try again in {int(delay) + 1} seconds.')

    try:
        result = generate_for_share(db, share_token.strip())
    except NotFound:
        record_lookup_attempt(client_key, success=False)
        raise
    except OtpShareError:
        raise
    except Exception:
        logger.exception('Shared TOTP generation failed')
        raise InternalError('Failed to generate shared TOTP')

    record_lookup_attempt(client_key, success=True)
    return result
