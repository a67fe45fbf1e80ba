from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from ayu.config import settings
from ayu.database import get_db
from ayu.models.user import User
from ayu.services.auth_service import decode_access_token


def _token_subject(token: str) -> int:
    try:
        payload = decode_access_token(token)
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(settings.bearer_scheme),
    db: Session = Depends(get_db)
):
    user_id = _token_subject(credentials.credentials)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_token_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(settings.optional_bearer_scheme),
) -> int | None:
    """Subject of the bearer token when one is presented, otherwise None."""
    if credentials is None:
        return None
    return _token_subject(credentials.credentials)
