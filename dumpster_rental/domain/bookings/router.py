"""Booking router - customer bookings, guest details and booking emails"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    BookingCreate,
    BookingEmailRequest,
    BookingResponse,
    GuestInfoRequest,
    GuestInquiryRequest,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])

rate_limit_guest = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="guest_inquiry")


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.post("/bookings", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.create_booking(data, current_user)


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """The caller's bookings, newest first"""
    return service.list_bookings(current_user)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(booking_id, current_user)


@router.post("/api/save-guest-info")
async def save_guest_info(
    data: GuestInfoRequest, service: BookingService = Depends(get_booking_service)
):
    service.save_guest_info(data)
    return {"success": True}


@router.post("/api/guest-inquiry")
async def guest_inquiry(
    data: GuestInquiryRequest,
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_guest),
):
    return await service.send_guest_inquiry(data)


@router.post("/api/send-booking-email")
async def send_booking_email(
    data: BookingEmailRequest,
    _: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.send_booking_email(data)
