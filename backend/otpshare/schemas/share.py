from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer, field_validator

from otpshare.core.config import settings
from otpshare.otp.clock import as_utc


class ShareCreate(BaseModel):
    """
    expires_in_seconds omitted: default lifetime (24 h).
    expires_in_seconds null: the link never expires.
    """
    model_config = ConfigDict(extra='forbid')

    expires_in_seconds: Optional[int] = Field(default=None, ge=60)

    @field_validator('expires_in_seconds')
    @classmethod
    def validate_lifetime(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v > settings.SHARE_MAX_TTL_SECONDS:
            raise ValueError(f'expires_in_seconds must be at most {settings.SHARE_MAX_TTL_SECONDS}')
        return v

    def lifetime(self) -> Optional[timedelta]:
        """Grant lifetime, or None for a link that never expires."""
        if 'expires_in_seconds' not in self.model_fields_set:
            return timedelta(seconds=settings.SHARE_DEFAULT_TTL_SECONDS)
        if self.expires_in_seconds is None:
            return None
        return timedelta(seconds=self.expires_in_seconds)


class ShareOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    secret_id: str
    share_token: str
    expires_at: Optional[datetime] = None
    created_at: datetime

    @field_serializer('expires_at', 'created_at')
    def serialize_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    @computed_field
    @property
    def share_path(self) -> str:
        return f'/share/{self.share_token}'


class ShareSummary(BaseModel):
    """Listing view: the token itself is not repeated."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    secret_id: str
    expires_at: Optional[datetime] = None
    created_at: datetime

    @field_serializer('expires_at', 'created_at')
    def serialize_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None
