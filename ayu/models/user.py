import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, Float, Integer, String
from ayu.database import Base


class Gender(str, enum.Enum):
    male = "Male"
    female = "Female"
    other = "Other"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Registration fields
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # OTP pair, always written and cleared together
    otp = Column(Integer, nullable=True)
    otp_expires = Column(DateTime, nullable=True)

    # Profile fields collected by the getting-started wizard
    gender = Column(Enum(Gender, values_callable=lambda e: [m.value for m in e], name="gender"), nullable=True)
    dob = Column(Date, nullable=True)
    height = Column(Float, nullable=True)   # cm
    weight = Column(Float, nullable=True)   # kg
    profile_picture = Column(String, default="", nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
