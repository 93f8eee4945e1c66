"""
Access decisions for code generation.

Owner access compares the verified caller id with the record owner.
Share access resolves an exact share token to its secret, honouring the
grant's expiry. Neither path validates credentials itself.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from otpshare.core.errors import Expired, Forbidden, NotFound
from otpshare.core.records import SecretRecord, ShareGrant

logger = logging.getLogger(__name__)

ShareLookup = Callable[[str], Optional[ShareGrant]]


def authorize_owner_access(caller_id: str, secret_record: SecretRecord) -> bool:
    """True iff the caller owns the secret. Accepts any object with `id` and `owner_id`."""
    if not caller_id or caller_id != secret_record.owner_id:
        logger.info("Owner check failed for secret %s", secret_record.id)
        raise Forbidden()
    return True


def authorize_share_access(share_token: str, lookup: ShareLookup, at: datetime) -> ShareGrant:
    """
    Returns the live grant with its secret resolved.

    Raises NotFound for unknown tokens and grants whose secret is gone,
    Expired when expires_at is set and strictly before `at`.
    """
    grant = lookup(share_token) if share_token else None
    if grant is None:
        raise NotFound("Share link not found")
    if grant.secret is None:
        logger.warning("Share grant %s points to a deleted secret", grant.id)
        raise NotFound("Share link not found")
    if grant.is_expired(at):
        logger.info("Share grant %s expired at %s", grant.id, grant.expires_at)
        raise Expired()
    return grant
