import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..shared.validators import format_phone_number, phone_digits

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        digits = phone_digits(v)
        if digits and len(digits) < 10:
            raise ValueError("Phone number must have at least 10 digits")
        return digits


class ProfileResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    phone_display: str = ""
    company: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    role: str
    is_admin: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


def to_response(user: User) -> ProfileResponse:
    response = ProfileResponse.model_validate(user)
    response.phone_display = format_phone_number(user.phone)
    response.is_admin = user.has_admin_access
    return response


@router.get("", response_model=ProfileResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return to_response(current_user)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update contact details; phone numbers are stored as digits only"""
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, key, value or None)
    db.commit()
    db.refresh(current_user)
    logger.info(f"✅ Profile updated for user {current_user.id}")
    return to_response(current_user)
