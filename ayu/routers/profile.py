import time
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ayu.config import settings
from ayu.database import get_db
from ayu.models.user import User
from ayu.schemas.user import ProfileUpdate, public_profile
from ayu.services import account_service
from ayu.services.auth_middleware import get_current_user, get_token_user_id
from ayu.utils.errors import Forbidden
from ayu.utils.response import create_response, handle_exception

router = APIRouter(prefix=settings.API_PREFIX, tags=["Profile"])

ALLOWED_PHOTO_TYPES = {"image/jpeg", "image/png", "image/jpg"}


def _photo_dir() -> Path:
    path = Path(settings.UPLOAD_DIR) / "profile_photos"
    path.mkdir(parents=True, exist_ok=True)
    return path


@router.put("/updateprofile/{user_id}")
def update_profile(
    user_id: int,
    update: ProfileUpdate,
    token_user_id: int | None = Depends(get_token_user_id),
    db: Session = Depends(get_db)
):
    try:
        if token_user_id is None and settings.PROFILE_UPDATE_REQUIRE_TOKEN:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        if token_user_id is not None and token_user_id != user_id:
            raise Forbidden()

        user = account_service.update_profile(db, user_id, update.model_dump(exclude_unset=True))
        return create_response(
            message="Profile updated successfully",
            data=public_profile(user),
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.get("/user/{email:path}")
def get_user(email: str, db: Session = Depends(get_db)):
    try:
        user = account_service.get_user_by_email(db, email)
        return create_response(
            message="User fetched successfully",
            data=public_profile(user),
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.get("/profile/me")
def get_profile(current_user: User = Depends(get_current_user)):
    try:
        return create_response(
            message="Profile fetched successfully",
            data=public_profile(current_user),
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/profile/photo")
async def upload_profile_photo(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        if file.content_type not in ALLOWED_PHOTO_TYPES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported image type")

        extension = Path(file.filename or "").suffix.lower() or ".jpg"
        if extension not in {".jpg", ".jpeg", ".png"}:
            extension = ".jpg"

        filename = f"user_{current_user.id}_{int(time.time())}{extension}"
        file_path = _photo_dir() / filename

        contents = await file.read()
        file_path.write_bytes(contents)

        user = account_service.set_profile_picture(db, current_user, f"/uploads/profile_photos/{filename}")
        return create_response(
            message="Profile photo uploaded successfully",
            data=public_profile(user),
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)
