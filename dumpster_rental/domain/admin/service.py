"""Admin service - Phone bookings, cancellations, extensions and dashboard data"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import config
from ...email_service import (
    send_cancellation_email,
    send_extension_email,
    send_phone_booking_email,
)
from ...models import (
    Booking,
    BookingStatus,
    PaymentStatus,
    PhoneBookingGuest,
    User,
)
from ...shared.validators import (
    extract_zipcode,
    format_long_date,
    format_short_date,
    phone_digits,
    validate_email,
)
from ..bookings.repository import BookingRepository
from ..bookings.service import customer_contact
from ..distance.service import calculate_distance_fee
from ..inventory.repository import ContainerTypeRepository
from ..payment_links.repository import PaymentLinkRepository
from ..payments.repository import PaymentRepository
from ..pricing.calculator import calculate_pricing, extension_cost, recalculate_for_days, rental_days
from .repository import AdminRepository
from .schemas import (
    AdminBookingResponse,
    AdminPaymentResponse,
    AdminStats,
    AdminUserResponse,
    CancelBookingRequest,
    ExtendBookingRequest,
    PhoneBookingRequest,
    RecentBooking,
)

logger = logging.getLogger(__name__)

PHONE_BOOKING_TAG = "[PHONE BOOKING - Awaiting card]"


def plain_amount(value: float) -> str:
    """50 -> "50", 12.5 -> "12.5" for note tags"""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def append_note(notes: Optional[str], line: str) -> str:
    return f"{notes}\n\n{line}" if notes else line


def phone_booking_notes(
    notes: Optional[str],
    travel_fee: float,
    price_adjustment: float,
    adjustment_reason: Optional[str],
) -> str:
    result = notes or ""
    if travel_fee and travel_fee > 0:
        result = append_note(result, f"[Travel Fee: ${plain_amount(travel_fee)}]")
    if price_adjustment:
        kind = "Discount" if price_adjustment < 0 else "Additional Charge"
        reason = f" - {adjustment_reason}" if adjustment_reason else ""
        result = append_note(result, f"[{kind}: ${plain_amount(abs(price_adjustment))}{reason}]")
    return append_note(result, PHONE_BOOKING_TAG)


def booking_row(booking: Booking) -> AdminBookingResponse:
    guest = booking.guest_info
    if guest and guest.customer_email:
        name, email, phone = guest.customer_name, guest.customer_email, guest.customer_phone
    elif booking.user:
        name, email, phone = booking.user.full_name, booking.user.email, booking.user.phone
    else:
        name = email = phone = None
    return AdminBookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        container_type_name=booking.container_type_name,
        customer_name=name,
        customer_email=email,
        customer_phone=phone,
        start_date=booking.start_date,
        end_date=booking.end_date,
        service_type=booking.service_type,
        pickup_time=booking.pickup_time,
        customer_address=booking.customer_address,
        delivery_address=booking.delivery_address,
        total_amount=booking.total_amount,
        pricing_breakdown=booking.pricing_breakdown,
        notes=booking.notes,
        status=booking.status,
        payment_status=booking.payment_status,
        payment_method_id=booking.payment_method_id,
        signature_img_url=booking.signature_img_url,
        is_phone_booking=guest is not None or PHONE_BOOKING_TAG in (booking.notes or ""),
        created_at=booking.created_at,
    )


class AdminService:
    """Service layer for admin dashboard business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()
        self.bookings = BookingRepository()

    def _get_booking(self, booking_id: Optional[str]) -> Booking:
        if not booking_id:
            raise HTTPException(status_code=400, detail="Booking ID is required")
        booking = self.bookings.get_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def _guest_profile(self) -> User:
        """Shared profile that owns phone bookings of customers without an account"""
        guest = self.repo.get_user_by_email(self.db, config.GUEST_USER_EMAIL)
        if guest is None:
            guest = User(email=config.GUEST_USER_EMAIL, full_name="Guest User", role="client")
            self.db.add(guest)
            self.db.flush()
            logger.info(f"👤 Guest profile created: {config.GUEST_USER_EMAIL}")
        return guest

    # ------------------------------------------------------------------
    # Phone bookings
    # ------------------------------------------------------------------

    async def create_phone_booking(self, data: PhoneBookingRequest) -> dict:
        if not (
            data.customerName
            and data.customerEmail
            and data.customerPhone
            and data.containerTypeId
            and data.startDate
            and data.endDate
            and data.serviceType
            and data.customerAddress
        ):
            raise HTTPException(status_code=400, detail="Missing required fields")
        try:
            customer_email = validate_email(data.customerEmail)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if data.serviceType not in ("delivery", "pickup"):
            raise HTTPException(status_code=400, detail="serviceType must be 'delivery' or 'pickup'")

        container = ContainerTypeRepository.get_by_id(self.db, data.containerTypeId)
        if not container:
            raise HTTPException(status_code=404, detail="Container type not found")

        distance_miles = None
        distance_fee = 0
        zipcode = extract_zipcode(data.deliveryAddress or data.customerAddress)
        if data.serviceType == "delivery" and zipcode:
            fee = await calculate_distance_fee(zipcode)
            if not fee.get("error"):
                distance_miles = fee["distanceMiles"]
                distance_fee = fee["distanceFee"]

        try:
            breakdown = calculate_pricing(
                container_type=container.name,
                base_price=container.price_per_day,
                start_date=data.startDate,
                end_date=data.endDate,
                extra_tonnage=data.extraTonnage,
                appliance_count=data.applianceCount,
                distance_miles=distance_miles,
                distance_fee=distance_fee,
                travel_fee=data.travelFee,
                price_adjustment=data.priceAdjustment,
                adjustment_reason=data.adjustmentReason,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        customer_phone = phone_digits(data.customerPhone)
        expires_at = datetime.utcnow() + timedelta(days=config.PAYMENT_LINK_TTL_DAYS)

        try:
            profile = self.repo.get_user_by_email(self.db, customer_email)
            if profile:
                profile.full_name = data.customerName
                profile.phone = customer_phone
                owner = profile
            else:
                owner = self._guest_profile()

            booking = Booking(
                user_id=owner.id,
                container_type_id=container.id,
                start_date=data.startDate,
                end_date=data.endDate,
                service_type=data.serviceType,
                pickup_time=data.pickupTime,
                customer_address=data.customerAddress,
                delivery_address=data.deliveryAddress or None,
                total_amount=breakdown.total,
                extra_tonnage=breakdown.extraTonnage,
                appliance_count=breakdown.applianceCount,
                travel_fee=data.travelFee or None,
                price_adjustment=data.priceAdjustment or None,
                adjustment_reason=data.adjustmentReason if data.priceAdjustment else None,
                distance_miles=distance_miles,
                distance_fee=distance_fee,
                pricing_breakdown=breakdown.model_dump(),
                notes=phone_booking_notes(
                    data.notes, data.travelFee, data.priceAdjustment, data.adjustmentReason
                ),
                status=BookingStatus.AWAITING_CARD,
                payment_status=PaymentStatus.PENDING,
            )
            self.db.add(booking)
            self.db.flush()

            if profile is None:
                self.db.add(
                    PhoneBookingGuest(
                        booking_id=booking.id,
                        customer_name=data.customerName,
                        customer_email=customer_email,
                        customer_phone=customer_phone or "",
                        customer_address=data.customerAddress,
                    )
                )

            link = PaymentLinkRepository.create(
                self.db,
                booking_id=booking.id,
                customer_email=customer_email,
                customer_name=data.customerName,
                customer_phone=customer_phone,
                expires_at=expires_at,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create phone booking for {customer_email}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create booking") from e

        payment_url = f"{config.APP_URL}/payment/{link.token}"
        logger.info(f"📞 Phone booking {booking.short_id} created, link expires {expires_at:%Y-%m-%d}")

        try:
            await send_phone_booking_email(
                customer_name=data.customerName,
                customer_email=customer_email,
                payment_link=payment_url,
                container_type=container.name,
                start_date=format_long_date(data.startDate),
                end_date=format_long_date(data.endDate),
                total_amount=breakdown.total,
                expires_at=format_long_date(expires_at.date()),
            )
        except Exception as e:
            logger.error(f"❌ Error sending payment link email for {booking.short_id}: {e}")

        return {
            "success": True,
            "bookingId": booking.id,
            "paymentLink": payment_url,
            "expiresAt": expires_at.isoformat(),
            "totalAmount": breakdown.total,
        }

    # ------------------------------------------------------------------
    # Booking changes
    # ------------------------------------------------------------------

    async def cancel_booking(self, data: CancelBookingRequest) -> dict:
        booking = self._get_booking(data.bookingId)
        if booking.status == BookingStatus.CANCELLED:
            raise HTTPException(status_code=400, detail="Booking is already cancelled")

        reason = f" - {data.reason}" if data.reason else ""
        booking.status = BookingStatus.CANCELLED
        booking.notes = append_note(booking.notes, f"[CANCELLED{reason}]")
        self.db.commit()
        logger.info(f"🚫 Booking {booking.short_id} cancelled")

        email_sent = False
        customer_name, customer_email = customer_contact(self.db, booking)
        if customer_email:
            try:
                result = await send_cancellation_email(
                    customer_name=customer_name or "Valued Customer",
                    customer_email=customer_email,
                    booking_id=booking.id,
                    container_type=booking.container_type_name or "Container",
                    start_date=format_long_date(booking.start_date),
                    end_date=format_long_date(booking.end_date),
                    reason=data.reason,
                )
                email_sent = not result.get("skipped")
            except Exception as e:
                logger.error(f"❌ Error sending cancellation email for {booking.short_id}: {e}")

        return {"success": True, "message": "Booking cancelled successfully", "emailSent": email_sent}

    async def extend_booking(self, data: ExtendBookingRequest) -> dict:
        if not data.bookingId:
            raise HTTPException(status_code=400, detail="Booking ID is required")
        if not data.newEndDate:
            raise HTTPException(status_code=400, detail="New end date is required")
        booking = self._get_booking(data.bookingId)

        if booking.status == BookingStatus.CANCELLED:
            raise HTTPException(status_code=400, detail="Cannot extend a cancelled booking")
        if booking.status == BookingStatus.COMPLETED:
            raise HTTPException(status_code=400, detail="Cannot extend a completed booking")

        current_end = booking.end_date
        new_end = data.newEndDate
        if new_end <= current_end:
            raise HTTPException(status_code=400, detail="New end date must be after the current end date")
        if new_end <= booking.start_date:
            raise HTTPException(status_code=400, detail="New end date must be after the start date")

        additional_days = (new_end - current_end).days
        additional_cost = extension_cost(additional_days)

        if booking.pricing_breakdown:
            breakdown = recalculate_for_days(booking.pricing_breakdown, rental_days(booking.start_date, new_end))
            booking.pricing_breakdown = breakdown
            new_total = breakdown["total"]
        else:
            new_total = round((booking.total_amount or 0) + additional_cost, 2)

        booking.end_date = new_end
        booking.total_amount = new_total
        booking.notes = append_note(
            booking.notes,
            f"[EXTENDED - End date changed from {format_short_date(current_end)} to "
            f"{format_short_date(new_end)} (+{additional_days} days, +${plain_amount(additional_cost)})]",
        )
        self.db.commit()
        logger.info(f"📅 Booking {booking.short_id} extended by {additional_days} days")

        email_sent = False
        customer_name, customer_email = customer_contact(self.db, booking)
        if customer_email:
            try:
                result = await send_extension_email(
                    customer_name=customer_name or "Valued Customer",
                    customer_email=customer_email,
                    booking_id=booking.id,
                    container_type=booking.container_type_name or "Container",
                    original_end_date=format_long_date(current_end),
                    new_end_date=format_long_date(new_end),
                    additional_days=additional_days,
                    additional_cost=additional_cost,
                    new_total=new_total,
                )
                email_sent = not result.get("skipped")
            except Exception as e:
                logger.error(f"❌ Error sending extension email for {booking.short_id}: {e}")

        return {
            "success": True,
            "message": "Booking extended successfully",
            "emailSent": email_sent,
            "additionalDays": additional_days,
            "additionalCost": additional_cost,
            "newTotalAmount": new_total,
            "newEndDate": new_end.isoformat(),
        }

    def migrate_phone_numbers(self) -> dict:
        """Copy phone numbers captured on payment links onto profiles that have none"""
        links = PaymentLinkRepository.list_with_phone(self.db)
        updated = 0
        errors = []
        for link in links:
            if not link.customer_phone or not link.customer_email:
                continue
            profile = self.repo.get_user_by_email(self.db, link.customer_email)
            if not profile or profile.phone:
                continue
            try:
                profile.phone = phone_digits(link.customer_phone)
                self.db.commit()
                updated += 1
                logger.info(f"✅ Updated phone for {link.customer_email}")
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"❌ Error updating profile {profile.id}: {e}")
                errors.append(f"{link.customer_email}: {e}")

        return {
            "success": True,
            "updatedCount": updated,
            "totalChecked": len(links),
            "errors": errors or None,
        }

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def stats(self) -> AdminStats:
        recent = []
        for booking in self.repo.recent_bookings(self.db):
            customer_name, _ = customer_contact(self.db, booking)
            recent.append(
                RecentBooking(
                    id=booking.id,
                    customer_name=customer_name,
                    container_type_name=booking.container_type_name,
                    start_date=booking.start_date,
                    status=booking.status,
                    total_amount=booking.total_amount,
                )
            )
        return AdminStats(
            totalBookings=self.repo.count_bookings(self.db),
            pendingBookings=self.repo.count_bookings(self.db, BookingStatus.PENDING),
            totalUsers=self.repo.count_users(self.db),
            totalRevenue=self.repo.completed_revenue(self.db),
            recentBookings=recent,
        )

    def list_bookings(
        self, status: Optional[str] = None, payment_status: Optional[str] = None
    ) -> list[AdminBookingResponse]:
        return [booking_row(b) for b in self.repo.list_bookings(self.db, status, payment_status)]

    def calendar(self, start: date, end: date) -> list[AdminBookingResponse]:
        if end < start:
            raise HTTPException(status_code=400, detail="End date must be on or after the start date")
        return [booking_row(b) for b in self.repo.bookings_between(self.db, start, end)]

    def list_users(self) -> list[AdminUserResponse]:
        return [
            AdminUserResponse(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                phone=user.phone,
                role=user.role,
                is_admin=user.has_admin_access,
                stripe_customer_id=user.stripe_customer_id,
                booking_count=count,
                created_at=user.created_at,
            )
            for user, count in self.repo.users_with_booking_counts(self.db)
        ]

    def update_role(self, user_id: int, role: str, admin: User) -> AdminUserResponse:
        if user_id == admin.id:
            raise HTTPException(status_code=400, detail="You cannot change your own role")
        user = self.repo.get_user(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        user.role = role
        user.is_admin = role == "admin"
        self.db.commit()
        logger.info(f"🔑 User {user.id} role set to {role} by admin {admin.id}")
        return AdminUserResponse(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            phone=user.phone,
            role=user.role,
            is_admin=user.has_admin_access,
            stripe_customer_id=user.stripe_customer_id,
            booking_count=len(user.bookings),
            created_at=user.created_at,
        )

    def list_payments(self) -> list[AdminPaymentResponse]:
        rows = []
        for payment in PaymentRepository.list_with_bookings(self.db):
            booking = payment.booking
            customer_name, customer_email = customer_contact(self.db, booking)
            rows.append(
                AdminPaymentResponse(
                    id=payment.id,
                    booking_id=payment.booking_id,
                    amount=payment.amount,
                    transaction_id=payment.transaction_id,
                    status=payment.status,
                    notes=payment.notes,
                    created_at=payment.created_at,
                    customer_name=customer_name,
                    customer_email=customer_email,
                    container_type_name=booking.container_type_name,
                )
            )
        return rows
