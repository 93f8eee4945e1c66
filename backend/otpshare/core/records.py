"""Immutable in-memory views of stored secrets and share grants."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from otpshare.otp.engine import Algorithm


@dataclass(frozen=True)
class SecretRecord:
    id: str
    owner_id: str
    label: str
    issuer: Optional[str]
    key_material: bytes = field(repr=False)
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = 6
    period_seconds: int = 30
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ShareGrant:
    id: str
    secret_id: str
    share_token: str = field(repr=False)
    expires_at: Optional[datetime]
    created_at: Optional[datetime] = None
    # resolved target; None when the secret no longer exists
    secret: Optional[SecretRecord] = None

    def is_expired(self, at: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < at
