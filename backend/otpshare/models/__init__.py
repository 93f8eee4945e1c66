# otpshare/models/__init__.py
from .secret import TotpSecret
from .share import SharedSecret

__all__ = ["TotpSecret", "SharedSecret"]
