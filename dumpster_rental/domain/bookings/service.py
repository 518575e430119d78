"""Booking service - Business logic for customer bookings"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import send_booking_emails, send_guest_inquiry_email
from ...models import Booking, BookingStatus, PaymentStatus, User
from ...shared.validators import (
    extract_zipcode,
    format_long_date,
    phone_digits,
    validate_email,
)
from ..distance.service import calculate_distance_fee
from ..inventory.repository import ContainerTypeRepository
from ..inventory.service import InventoryService
from ..pricing.calculator import calculate_pricing
from .repository import BookingRepository
from .schemas import BookingCreate, BookingEmailRequest, GuestInfoRequest, GuestInquiryRequest

logger = logging.getLogger(__name__)


def customer_contact(db: Session, booking: Booking) -> tuple[Optional[str], Optional[str]]:
    """(name, email) to write to about a booking; phone-booking guest details win over the profile"""
    guest = BookingRepository.get_guest_info(db, booking.id)
    if guest and guest.customer_email:
        return guest.customer_name, guest.customer_email
    if booking.user:
        return booking.user.full_name, booking.user.email
    return None, None


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    async def create_booking(self, data: BookingCreate, user: User, today: Optional[date] = None) -> Booking:
        container = ContainerTypeRepository.get_by_id(self.db, data.containerTypeId)
        if not container:
            raise HTTPException(status_code=404, detail="Container type not found")

        if data.endDate < data.startDate:
            raise HTTPException(status_code=400, detail="End date must be on or after the start date")
        if data.startDate < (today or date.today()):
            raise HTTPException(status_code=400, detail="Start date cannot be in the past")

        availability = InventoryService(self.db).availability(
            container.id, data.startDate, data.endDate
        )
        if availability["available"] <= 0:
            raise HTTPException(
                status_code=409, detail="This container is not available for the selected dates"
            )

        distance_miles = None
        distance_fee = 0
        zipcode = data.zipCode or extract_zipcode(data.deliveryAddress)
        if data.serviceType == "delivery" and zipcode:
            fee = await calculate_distance_fee(zipcode)
            if fee.get("error"):
                logger.warning(f"⚠️ Distance fee unavailable for {zipcode}: {fee['error']}")
            else:
                distance_miles = fee["distanceMiles"]
                distance_fee = fee["distanceFee"]

        breakdown = calculate_pricing(
            container_type=container.name,
            base_price=container.price_per_day,
            start_date=data.startDate,
            end_date=data.endDate,
            extra_tonnage=data.extraTonnage,
            appliance_count=data.applianceCount,
            distance_miles=distance_miles,
            distance_fee=distance_fee,
        )

        if data.phone and not user.phone:
            user.phone = phone_digits(data.phone)

        booking = self.repo.create(
            self.db,
            user_id=user.id,
            container_type_id=container.id,
            start_date=data.startDate,
            end_date=data.endDate,
            service_type=data.serviceType,
            pickup_time=data.pickupTime,
            customer_address=data.customerAddress,
            delivery_address=data.deliveryAddress,
            total_amount=breakdown.total,
            extra_tonnage=breakdown.extraTonnage,
            appliance_count=breakdown.applianceCount,
            distance_miles=distance_miles,
            distance_fee=distance_fee,
            pricing_breakdown=breakdown.model_dump(),
            notes=data.notes,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )
        logger.info(f"📦 Booking {booking.short_id} created for user {user.id}: ${booking.total_amount}")
        return booking

    def list_bookings(self, user: User) -> list[Booking]:
        return self.repo.list_for_user(self.db, user.id)

    def get_booking(self, booking_id: str, user: User) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking or (booking.user_id != user.id and not user.has_admin_access):
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def save_guest_info(self, data: GuestInfoRequest) -> None:
        if not data.bookingId:
            raise HTTPException(status_code=400, detail="Missing booking ID")
        if not self.repo.get_by_id(self.db, data.bookingId):
            raise HTTPException(status_code=404, detail="Booking not found")
        # Public endpoint: contact details are written once, never replaced
        if self.repo.get_guest_info(self.db, data.bookingId):
            raise HTTPException(status_code=409, detail="Guest info already saved for this booking")

        self.repo.save_guest_info(
            self.db,
            data.bookingId,
            customer_name=data.customerName or "Guest",
            customer_email=data.customerEmail or "",
            customer_phone=data.customerPhone or "",
            customer_address=data.customerAddress or "",
        )

    async def send_guest_inquiry(self, data: GuestInquiryRequest) -> dict:
        if not (
            data.customerName
            and data.customerEmail
            and data.containerTypeId
            and data.startDate
            and data.endDate
        ):
            raise HTTPException(status_code=400, detail="Missing required fields")
        try:
            customer_email = validate_email(data.customerEmail)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        container = ContainerTypeRepository.get_by_id(self.db, data.containerTypeId)
        if container:
            container_label = f"{container.name} - {container.size}" if container.size else container.name
        else:
            container_label = "Unknown"

        try:
            result = await send_guest_inquiry_email(
                customer_name=data.customerName,
                customer_email=customer_email,
                container_type=container_label,
                start_date=data.startDate,
                end_date=data.endDate,
                service_type=data.serviceType or "delivery",
                phone=data.phone,
                delivery_address=data.deliveryAddress,
                notes=data.notes,
            )
        except Exception as e:
            logger.error(f"❌ Guest inquiry email failed: {e}")
            raise HTTPException(status_code=500, detail="Failed to send inquiry") from e

        logger.info(f"📨 Guest inquiry from {customer_email}")
        return {"success": True, "skipped": bool(result.get("skipped"))}

    async def send_booking_email(self, data: BookingEmailRequest) -> dict:
        if not (data.bookingId and data.customerEmail and data.customerName):
            raise HTTPException(status_code=400, detail="Missing required fields")

        booking = self.repo.get_by_id(self.db, data.bookingId)
        container_type = data.containerType or (
            booking.container_type.name if booking and booking.container_type else "Container"
        )
        start_date = data.startDate or (format_long_date(booking.start_date) if booking else "")
        end_date = data.endDate or (format_long_date(booking.end_date) if booking else "")
        total_amount = data.totalAmount
        if total_amount is None:
            total_amount = booking.total_amount if booking else 0

        try:
            result = await send_booking_emails(
                booking_id=data.bookingId,
                customer_name=data.customerName,
                customer_email=data.customerEmail,
                container_type=container_type,
                start_date=start_date,
                end_date=end_date,
                service_type=data.serviceType or (booking.service_type if booking else "delivery"),
                total_amount=total_amount,
                delivery_address=data.deliveryAddress,
                pickup_time=data.pickupTime,
                notes=data.notes,
            )
        except Exception as e:
            logger.error(f"❌ Error sending booking emails: {e}")
            raise HTTPException(status_code=500, detail="Failed to send emails") from e

        return {
            "success": True,
            "message": "Booking confirmation emails sent successfully",
            "skipped": bool(result.get("skipped")),
        }
