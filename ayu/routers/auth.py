import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ayu.config import settings
from ayu.database import get_db
from ayu.schemas.user import (
    EmailOnlyRequest,
    ResetPasswordRequest,
    SigninRequest,
    SignupRequest,
    VerifyOtpRequest,
    public_profile,
)
from ayu.services import account_service
from ayu.utils.response import create_response, handle_exception

router = APIRouter(prefix=settings.API_PREFIX, tags=["Auth"])
logger = logging.getLogger(__name__)


@router.post("/signup")
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    try:
        logger.info("Signup requested for %s", body.email)
        user = account_service.signup(db, body.name, body.email, body.password, body.confirm_password)
        return create_response(
            message="User registered. Check your mail to verify OTP.",
            data={"email": user.email},
            status_code=status.HTTP_201_CREATED
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/verifyotp")
def verify_otp(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    try:
        account_service.verify_otp(db, body.email, body.otp)
        return create_response(
            message="Email verified successfully",
            data={"email": body.email, "is_verified": True},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/resendotp")
def resend_otp(body: EmailOnlyRequest, db: Session = Depends(get_db)):
    try:
        user = account_service.resend_otp(db, body.email)
        return create_response(
            message="OTP resent successfully",
            data={"email": user.email},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/signin")
def signin(body: SigninRequest, db: Session = Depends(get_db)):
    try:
        token, user = account_service.signin(db, body.email, body.password)
        return create_response(
            message="Signed in successfully",
            data={
                "token": token,
                "token_type": "bearer",
                "user": public_profile(user),
            },
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/forgotpassword")
def forgot_password(body: EmailOnlyRequest, db: Session = Depends(get_db)):
    try:
        user = account_service.forgot_password(db, body.email)
        return create_response(
            message="OTP sent to your email",
            data={"email": user.email},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/resetpassword")
def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        account_service.reset_password(
            db, body.email, body.otp, body.new_password, body.confirm_password
        )
        return create_response(
            message="Password reset successfully",
            data={"email": body.email},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)
