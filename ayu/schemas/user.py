from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ayu.models.user import Gender


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    confirm_password: str | None = Field(default=None, alias="confirmPassword")


class SigninRequest(BaseModel):
    email: EmailStr | None = None
    password: str | None = None


class EmailOnlyRequest(BaseModel):
    email: EmailStr | None = None


class VerifyOtpRequest(BaseModel):
    email: EmailStr | None = None
    otp: str | None = None

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_otp(cls, value):
        # clients send the code either as a number or as a string
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ResetPasswordRequest(VerifyOtpRequest):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str | None = Field(default=None, alias="newPassword")
    confirm_password: str | None = Field(default=None, alias="confirmPassword")


class ProfileUpdate(BaseModel):
    name: str | None = None
    gender: Gender | None = None
    dob: date | None = None
    height: float | None = None  # cm
    weight: float | None = None  # kg

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str:
        # only runs when the field is present in the body
        if value is None or not value.strip():
            raise ValueError("name cannot be empty")
        return value.strip()

    @field_validator("height", "weight")
    @classmethod
    def validate_measurement(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("must be positive")
        return value


class ProfileResponse(BaseModel):
    id: int
    name: str
    email: str
    dob: date | None
    gender: Gender | None
    height: float | None
    weight: float | None
    profile_picture: str = Field(default="", serialization_alias="profilePicture")

    model_config = {"from_attributes": True}

    @field_validator("profile_picture", mode="before")
    @classmethod
    def default_picture(cls, value):
        return value or ""


def public_profile(user) -> dict:
    """Client-safe projection of a user record (no hash, no OTP fields)."""
    return ProfileResponse.model_validate(user).model_dump(by_alias=True)
