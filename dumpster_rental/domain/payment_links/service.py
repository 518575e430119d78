"""Payment link service - card collection for phone bookings and the expiry sweep"""

import logging
from datetime import datetime
from typing import Optional

import stripe
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import send_phone_booking_completed_email
from ...models import BookingStatus, PaymentLink, PaymentLinkStatus, PaymentStatus
from ..payments.stripe_gateway import StripeGateway
from .repository import PaymentLinkRepository
from .schemas import (
    CompletePaymentLinkRequest,
    ExpiredLink,
    ExpireLinksResponse,
    PaymentLinkBooking,
    PaymentLinkResponse,
)

logger = logging.getLogger(__name__)

EXPIRED_BOOKING_NOTE = "Cancelled - Payment link expired without completion"


def link_status(link: PaymentLink, now: Optional[datetime] = None) -> str:
    """Stored status, reported as expired once a pending link is past its deadline"""
    if link.status == PaymentLinkStatus.PENDING and (now or datetime.utcnow()) > link.expires_at:
        return PaymentLinkStatus.EXPIRED
    return link.status


def expire_old_links(db: Session, now: Optional[datetime] = None) -> ExpireLinksResponse:
    """Expire overdue pending links and cancel bookings still waiting for a card"""
    now = now or datetime.utcnow()
    expired = PaymentLinkRepository.list_expired_pending(db, now)
    if not expired:
        return ExpireLinksResponse(message="No expired links found", expiredCount=0)

    for link in expired:
        link.status = PaymentLinkStatus.EXPIRED
        booking = link.booking
        if booking and booking.status == BookingStatus.AWAITING_CARD:
            booking.status = BookingStatus.CANCELLED
            booking.payment_status = PaymentStatus.FAILED
            booking.notes = f"{booking.notes}\n{EXPIRED_BOOKING_NOTE}" if booking.notes else EXPIRED_BOOKING_NOTE
    db.commit()

    logger.info(f"⏰ Expired {len(expired)} payment links and cancelled associated bookings")
    return ExpireLinksResponse(
        message=f"Expired {len(expired)} payment links",
        expiredCount=len(expired),
        expiredLinks=[
            ExpiredLink(id=link.id, token=link.token, bookingId=link.booking_id) for link in expired
        ],
    )


class PaymentLinkService:
    """Service layer for payment link business logic"""

    def __init__(self, db: Session, gateway: Optional[StripeGateway] = None):
        self.db = db
        self.gateway = gateway
        self.repo = PaymentLinkRepository()

    def _get_link(self, token: str) -> PaymentLink:
        link = self.repo.get_by_token(self.db, token)
        if not link:
            raise HTTPException(status_code=404, detail="Invalid payment link")
        return link

    def get_link(self, token: str) -> PaymentLinkResponse:
        link = self._get_link(token)
        booking = link.booking
        return PaymentLinkResponse(
            token=link.token,
            status=link_status(link),
            customerName=link.customer_name,
            customerEmail=link.customer_email,
            customerPhone=link.customer_phone,
            expiresAt=link.expires_at,
            completedAt=link.completed_at,
            booking=PaymentLinkBooking(
                id=booking.id,
                containerType=booking.container_type_name,
                startDate=booking.start_date,
                endDate=booking.end_date,
                serviceType=booking.service_type,
                deliveryAddress=booking.delivery_address,
                totalAmount=booking.total_amount,
                status=booking.status,
                pricingBreakdown=booking.pricing_breakdown,
            ),
        )

    def _save_card(self, link: PaymentLink, payment_method_id: str) -> str:
        """Find or create the Stripe customer for the link email and make the card its default"""
        customer = self.gateway.find_customer_by_email(link.customer_email)
        if customer is None:
            customer = self.gateway.create_customer(
                email=link.customer_email,
                name=link.customer_name,
                phone=link.customer_phone,
                metadata={"booking_id": link.booking_id},
            )
        self.gateway.attach_payment_method(payment_method_id, customer.id)
        self.gateway.set_default_payment_method(customer.id, payment_method_id)
        return customer.id

    async def complete(self, data: CompletePaymentLinkRequest) -> dict:
        if not data.token or not data.paymentMethodId or not data.signatureUrl:
            raise HTTPException(status_code=400, detail="Missing required fields")

        link = self._get_link(data.token)
        if link.status == PaymentLinkStatus.COMPLETED:
            raise HTTPException(status_code=400, detail="Payment link already completed")
        if datetime.utcnow() > link.expires_at:
            raise HTTPException(status_code=400, detail="Payment link expired")

        booking = link.booking
        if booking.status == BookingStatus.CANCELLED:
            raise HTTPException(status_code=400, detail="Booking is cancelled")

        try:
            customer_id = self._save_card(link, data.paymentMethodId)
        except stripe.StripeError as e:
            logger.error(f"❌ Stripe error saving card for link {link.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save payment method") from e
        logger.info(f"✅ Payment method attached to customer {customer_id}")

        if booking.user and booking.user.email == link.customer_email and not booking.user.stripe_customer_id:
            booking.user.stripe_customer_id = customer_id

        booking.payment_method_id = data.paymentMethodId
        booking.signature_img_url = data.signatureUrl
        booking.status = BookingStatus.PENDING
        booking.payment_status = PaymentStatus.PENDING
        link.status = PaymentLinkStatus.COMPLETED
        link.completed_at = datetime.utcnow()
        self.db.commit()

        try:
            await send_phone_booking_completed_email(
                customer_name=link.customer_name,
                customer_email=link.customer_email,
                booking_id=booking.id,
                container_type=booking.container_type_name or "Container",
                total_amount=booking.total_amount,
            )
        except Exception as e:
            logger.error(f"❌ Error sending completion email for {booking.short_id}: {e}")

        return {"success": True, "bookingId": booking.id}
