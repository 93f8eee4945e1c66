# otpshare/models/secret.py
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otpshare.db.base import Base
from otpshare.otp.clock import utcnow


class TotpSecret(Base):
    __tablename__ = "totp_secrets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    owner_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)

    label: Mapped[str] = mapped_column(String(255), nullable=False)
    issuer: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # AES-GCM sealed (nonce + ciphertext), secret id as AAD
    key_material_enc: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    algorithm: Mapped[str] = mapped_column(String(10), default="SHA1", nullable=False)
    digits: Mapped[int] = mapped_column(Integer, default=6, nullable=False)
    period_seconds: Mapped[int] = mapped_column(Integer, default=30, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    shares = relationship(
        "SharedSecret",
        back_populates="secret",
        cascade="all, delete-orphan",
    )
