# otpshare/db/init_db.py
from otpshare.db.base import Base
from otpshare.db.session import get_engine

# models must be imported so the tables are registered on Base.metadata
from otpshare import models  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=get_engine())
