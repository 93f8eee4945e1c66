from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from otpshare.core.errors import InvalidKey
from otpshare.otp.clock import as_utc
from otpshare.otp.engine import Algorithm, decode_key
from otpshare.security.sanitizer import InputSanitizer


class SecretCreate(BaseModel):
    """
    New TOTP secret. Defaults (SHA1, 6 digits, 30 s) are applied here,
    once, so generation is fully determined by stored data.
    """
    model_config = ConfigDict(extra='forbid')

    label: str = Field(..., min_length=1, max_length=255)
    issuer: Optional[str] = Field(default=None, max_length=255)
    secret: str = Field(
        ...,
        min_length=1,
        max_length=1024,
        description='Shared secret in base32 (spaces, hyphens and padding optional)',
    )
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = Field(default=6, ge=6, le=8)
    period: int = Field(default=30, ge=15, le=120)

    @field_validator('label')
    @classmethod
    def validate_label(cls, v: str) -> str:
        return InputSanitizer.sanitize_label(v)

    @field_validator('issuer')
    @classmethod
    def validate_issuer(cls, v: Optional[str]) -> Optional[str]:
        return InputSanitizer.sanitize_issuer(v)

    @field_validator('secret')
    @classmethod
    def validate_secret(cls, v: str) -> str:
        try:
            decode_key(v)
        except InvalidKey as e:
            raise ValueError(e.message)
        return v

    @field_validator('algorithm', mode='before')
    @classmethod
    def normalize_algorithm(cls, v):
        if isinstance(v, str):
            return v.strip().upper().replace('-', '')
        return v

    def key_material(self) -> bytes:
        return decode_key(self.secret)


class SecretUpdate(BaseModel):
    """Metadata update. The key itself cannot be changed."""
    model_config = ConfigDict(extra='forbid')

    label: Optional[str] = Field(default=None, min_length=1, max_length=255)
    issuer: Optional[str] = Field(default=None, max_length=255)
    algorithm: Optional[Algorithm] = None
    digits: Optional[int] = Field(default=None, ge=6, le=8)
    period: Optional[int] = Field(default=None, ge=15, le=120)

    @field_validator('label')
    @classmethod
    def validate_label(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError('Label cannot be empty')
        return InputSanitizer.sanitize_label(v)

    @field_validator('issuer')
    @classmethod
    def validate_issuer(cls, v: Optional[str]) -> Optional[str]:
        return InputSanitizer.sanitize_issuer(v)

    @field_validator('algorithm', mode='before')
    @classmethod
    def normalize_algorithm(cls, v):
        if isinstance(v, str):
            return v.strip().upper().replace('-', '')
        return v

    @model_validator(mode='after')
    def reject_nulls(self) -> 'SecretUpdate':
        for field in ('algorithm', 'digits', 'period'):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'{field} cannot be null')
        return self

    def changes(self) -> dict:
        """Fields explicitly sent by the client, in repository names."""
        data = self.model_dump(exclude_unset=True)
        if 'period' in data:
            data['period_seconds'] = data.pop('period')
        return data


class SecretOut(BaseModel):
    """Secret metadata. Key material is never part of it."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    issuer: Optional[str] = None
    algorithm: Algorithm
    digits: int
    period: int = Field(validation_alias=AliasChoices('period_seconds', 'period'))
    created_at: datetime
    updated_at: datetime

    @field_serializer('created_at', 'updated_at')
    def serialize_utc(self, value: datetime) -> datetime:
        return as_utc(value)
