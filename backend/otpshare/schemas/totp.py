from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_serializer

from otpshare.otp.clock import as_utc
from otpshare.otp.engine import Algorithm


class TotpCodeOut(BaseModel):
    """Current code for an owner."""
    code: str
    label: str
    issuer: Optional[str] = None
    expires_in: int
    algorithm: Algorithm
    digits: int


class SharedTotpOut(BaseModel):
    """Current code through a share link: label/issuer/code/expiry only."""
    code: str
    label: str
    issuer: Optional[str] = None
    expires_in: int
    readonly: Literal[True] = True
    share_expires_at: Optional[datetime] = None

    @field_serializer('share_expires_at')
    def serialize_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None
