"""One-time code helpers shared by signup, resend and password reset."""

import secrets
from datetime import datetime, timedelta, timezone

from ayu.config import settings

OTP_MIN = 100000
OTP_MAX = 999999


def utcnow() -> datetime:
    # naive UTC, matching how DateTime columns are stored
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_otp() -> int:
    """Draw a 6-digit code uniformly from [100000, 999999]."""
    return OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)


def otp_expiry(now: datetime | None = None) -> datetime:
    return (now or utcnow()) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


def issue_otp() -> tuple[int, datetime]:
    return generate_otp(), otp_expiry()


def parse_otp(value) -> int | None:
    """Normalise submitted input to an int code, or None when it can't be one."""
    if value is None:
        return None
    text = str(value).strip()
    if len(text) != 6 or not text.isdigit():
        return None
    return int(text)

