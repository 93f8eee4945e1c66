# otpshare/models/share.py
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from otpshare.db.base import Base
from otpshare.otp.clock import utcnow


class SharedSecret(Base):
    __tablename__ = "shared_secrets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    secret_id: Mapped[str] = mapped_column(
        ForeignKey("totp_secrets.id", ondelete="CASCADE"), index=True, nullable=False
    )
    share_token: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    # NULL means the grant never expires
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    secret = relationship("TotpSecret", back_populates="shares")
