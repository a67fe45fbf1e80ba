"""
Account lifecycle operations.

Signup creates an unverified record holding a one-time code; verification and
password reset consume that code through a single conditional UPDATE so two
concurrent requests can never both succeed with the same code. Every function
raises an ``AccountError`` subclass for expected failures and lets anything
else propagate to the router's ``handle_exception``.
"""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ayu.models.user import User
from ayu.services import email_service, otp_service
from ayu.services.auth_service import create_access_token, hash_password, verify_password
from ayu.utils.errors import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    InvalidOrExpired,
    NotFound,
    NotVerified,
    ValidationError,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def normalise_email(email: str | None) -> str | None:
    return email.strip().lower() if email else email


def _require(*values, message: str = "All fields must be filled") -> None:
    for value in values:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def get_user_by_email(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == normalise_email(email)).first()
    if not user:
        raise NotFound()
    return user


def get_user_by_id(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound()
    return user


def signup(db: Session, name, email, password, confirm_password) -> User:
    _require(name, email, password, confirm_password)
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    _check_password_length(password)

    email = normalise_email(email)
    if db.query(User.id).filter(User.email == email).first():
        raise EmailAlreadyRegistered()

    otp, expires = otp_service.issue_otp()
    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        is_verified=False,
        otp=otp,
        otp_expires=expires,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another signup for the same address
        db.rollback()
        raise EmailAlreadyRegistered()
    db.refresh(user)
    logger.info("Registered user id=%s email=%s", user.id, user.email)

    email_service.send_email_otp(user.email, otp, email_service.PURPOSE_VERIFY)
    return user


def verify_otp(db: Session, email, otp) -> None:
    _require(email, otp, message="Email and OTP are required")
    email = normalise_email(email)
    code = otp_service.parse_otp(otp)

    if code is not None:
        now = otp_service.utcnow()
        result = db.execute(
            update(User)
            .where(
                User.email == email,
                User.otp == code,
                User.otp_expires.is_not(None),
                User.otp_expires >= now,
            )
            .values(is_verified=True, otp=None, otp_expires=None)
        )
        _commit(db)
        if result.rowcount == 1:
            logger.info("Email verified for %s", email)
            return

    if not db.query(User.id).filter(User.email == email).first():
        raise NotFound()
    logger.info("Rejected OTP for %s", email)
    raise InvalidOrExpired()


def _rotate_otp(db: Session, email, purpose: str) -> User:
    _require(email, message="Email is required")
    user = get_user_by_email(db, email)

    otp, expires = otp_service.issue_otp()
    user.otp = otp
    user.otp_expires = expires
    _commit(db)
    logger.info("Issued %s OTP for user id=%s", purpose, user.id)

    email_service.send_email_otp(user.email, otp, purpose)
    return user


def resend_otp(db: Session, email) -> User:
    return _rotate_otp(db, email, email_service.PURPOSE_VERIFY)


def forgot_password(db: Session, email) -> User:
    return _rotate_otp(db, email, email_service.PURPOSE_RESET)


def reset_password(db: Session, email, otp, new_password, confirm_password) -> None:
    _require(email, otp, new_password, confirm_password)
    if new_password != confirm_password:
        raise ValidationError("Passwords do not match")
    _check_password_length(new_password)

    code = otp_service.parse_otp(otp)
    if code is None:
        raise InvalidOrExpired()

    email = normalise_email(email)
    result = db.execute(
        update(User)
        .where(
            User.email == email,
            User.otp == code,
            User.otp_expires.is_not(None),
            User.otp_expires >= otp_service.utcnow(),
        )
        .values(password_hash=hash_password(new_password), otp=None, otp_expires=None)
    )
    _commit(db)
    if result.rowcount != 1:
        logger.info("Rejected password reset for %s", email)
        raise InvalidOrExpired()
    logger.info("Password reset for %s", email)


def signin(db: Session, email, password) -> tuple[str, User]:
    _require(email, password, message="Email and password are required")
    user = get_user_by_email(db, email)

    if not user.is_verified:
        raise NotVerified()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    token = create_access_token({"sub": str(user.id)})
    logger.info("User id=%s signed in", user.id)
    return token, user


def update_profile(db: Session, user_id: int, changes: dict) -> User:
    user = get_user_by_id(db, user_id)
    for field, value in changes.items():
        setattr(user, field, value)
    _commit(db)
    db.refresh(user)
    logger.info("Updated profile fields %s for user id=%s", sorted(changes), user.id)
    return user


def set_profile_picture(db: Session, user: User, location: str) -> User:
    user.profile_picture = location
    _commit(db)
    db.refresh(user)
    return user
