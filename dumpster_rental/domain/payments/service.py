"""Payment service - Stripe orchestration around bookings and payment rows"""

import logging
import time
from datetime import datetime
from typing import Optional

import stripe
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import config
from ...email_service import send_payment_receipt_email, send_review_request_email
from ...models import Booking, BookingStatus, PaymentStatus, User
from ..bookings.repository import BookingRepository
from ..bookings.service import customer_contact
from .repository import PaymentRepository
from .schemas import (
    ChargeBookingCardRequest,
    ChargeSavedCardRequest,
    ConfirmPaymentRequest,
    PaymentHistoryItem,
    PaymentIntentRequest,
)
from .stripe_gateway import StripeGateway, card_summary

logger = logging.getLogger(__name__)

TEST_CHARGE_CENTS = 100


def to_cents(amount: float) -> int:
    return int(round(amount * 100))


def card_error(e: stripe.CardError) -> HTTPException:
    return HTTPException(status_code=400, detail=e.user_message or "Card was declined")


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session, gateway: StripeGateway):
        self.db = db
        self.gateway = gateway
        self.bookings = BookingRepository()
        self.payments = PaymentRepository()

    def _mark_paid(self, booking: Booking, amount: float, transaction_id: str, notes: Optional[str] = None):
        booking.payment_status = PaymentStatus.PAID
        booking.status = BookingStatus.CONFIRMED
        self.payments.record(self.db, booking.id, amount, "completed", transaction_id, notes)
        self.db.commit()
        logger.info(f"✅ Booking {booking.short_id} paid: ${amount:.2f} ({transaction_id})")

    def _mark_failed(self, booking: Booking, amount: float, transaction_id: str, notes: Optional[str] = None):
        booking.payment_status = PaymentStatus.FAILED
        self.payments.record(self.db, booking.id, amount, "failed", transaction_id, notes)
        self.db.commit()
        logger.warning(f"⚠️ Payment failed for booking {booking.short_id}: {notes or transaction_id}")

    def ensure_customer(self, user: User) -> str:
        """Stripe customer id of a profile, creating the customer on first use"""
        if user.stripe_customer_id:
            return user.stripe_customer_id
        customer = self.gateway.create_customer(
            email=user.email,
            name=user.full_name,
            metadata={"userId": str(user.id)},
        )
        user.stripe_customer_id = customer.id
        self.db.commit()
        return customer.id

    def _owned_booking(self, booking_id: str, user: User) -> Booking:
        booking = self.bookings.get_for_user(self.db, booking_id, user.id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    # ------------------------------------------------------------------
    # Customer flows
    # ------------------------------------------------------------------

    def create_payment_intent(self, data: PaymentIntentRequest, user: User) -> dict:
        if not data.amount or not data.bookingId:
            raise HTTPException(status_code=400, detail="Amount and booking ID are required")
        if data.amount <= 0:
            raise HTTPException(status_code=400, detail="Amount must be greater than zero")

        booking = self._owned_booking(data.bookingId, user)
        customer_id = self.ensure_customer(user)
        container_name = booking.container_type_name or "Container"

        try:
            intent = self.gateway.create_payment_intent(
                amount=to_cents(data.amount),
                currency=config.STRIPE_CURRENCY,
                customer=customer_id,
                setup_future_usage="off_session",
                automatic_payment_methods={"enabled": True},
                description=f"Container Rental - {container_name}",
                metadata={
                    "bookingId": booking.id,
                    "userId": str(user.id),
                    "containerType": container_name,
                    "rentalPeriod": f"{booking.start_date} to {booking.end_date}",
                    "serviceType": booking.service_type,
                },
                receipt_email=user.email,
            )
        except stripe.StripeError as e:
            logger.error(f"❌ Failed to create payment intent: {e}")
            raise HTTPException(status_code=500, detail="Failed to create payment intent") from e

        return {"clientSecret": intent.client_secret, "paymentIntentId": intent.id}

    def confirm_payment(self, data: ConfirmPaymentRequest, user: User) -> dict:
        """Record the outcome of a PaymentIntent the browser confirmed"""
        if not data.bookingId or not data.paymentIntentId:
            raise HTTPException(status_code=400, detail="Booking ID and payment intent ID are required")
        booking = self._owned_booking(data.bookingId, user)

        try:
            intent = self.gateway.retrieve_payment_intent(data.paymentIntentId)
        except stripe.StripeError as e:
            raise HTTPException(status_code=400, detail="Invalid payment intent") from e

        if (intent.metadata or {}).get("bookingId") != booking.id:
            raise HTTPException(status_code=400, detail="Payment intent does not match this booking")

        if booking.payment_status == PaymentStatus.PAID:
            return {"success": True, "status": intent.status, "alreadyRecorded": True}

        amount = intent.amount / 100
        if intent.status == "succeeded":
            self._mark_paid(booking, amount, intent.id)
            return {"success": True, "status": intent.status}

        self._mark_failed(booking, amount, intent.id, f"Payment {intent.status}")
        raise HTTPException(status_code=400, detail=f"Payment failed: {intent.status}")

    def create_setup_intent(self, user: User) -> dict:
        customer_id = self.ensure_customer(user)
        try:
            setup_intent = self.gateway.create_setup_intent(customer_id)
        except stripe.StripeError as e:
            logger.error(f"❌ Failed to create setup intent: {e}")
            raise HTTPException(status_code=500, detail="Failed to create setup intent") from e
        return {"clientSecret": setup_intent.client_secret, "customerId": customer_id}

    def list_payment_methods(self, user: User) -> dict:
        if not user.stripe_customer_id:
            return {"paymentMethods": []}
        methods = self.gateway.list_card_methods(user.stripe_customer_id)
        default_id = methods[0].id if methods else None
        return {"paymentMethods": [card_summary(pm, default_id) for pm in methods]}

    def payment_history(self, user: User) -> list[PaymentHistoryItem]:
        return [
            PaymentHistoryItem(
                id=payment.id,
                booking_id=payment.booking_id,
                amount=payment.amount,
                status=payment.status,
                transaction_id=payment.transaction_id,
                created_at=payment.created_at,
                container_type_name=payment.booking.container_type_name,
                start_date=payment.booking.start_date,
                end_date=payment.booking.end_date,
                booking_status=payment.booking.status,
            )
            for payment in self.payments.list_for_user(self.db, user.id)
        ]

    def delete_payment_method(self, payment_method_id: Optional[str], user: User) -> dict:
        if not payment_method_id:
            raise HTTPException(status_code=400, detail="Payment method ID is required")

        try:
            payment_method = self.gateway.retrieve_payment_method(payment_method_id)
        except stripe.StripeError as e:
            raise HTTPException(status_code=400, detail="Invalid payment method") from e

        if not user.stripe_customer_id or payment_method.customer != user.stripe_customer_id:
            raise HTTPException(status_code=403, detail="Unauthorized")

        try:
            self.gateway.detach_payment_method(payment_method_id)
        except stripe.StripeError as e:
            logger.error(f"❌ Failed to detach payment method for user {user.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove payment method") from e
        logger.info(f"🗑️ Payment method detached for user {user.id}")
        return {"success": True}

    def verify_payment_method(self, payment_method_id: Optional[str], user: User) -> dict:
        if not payment_method_id:
            raise HTTPException(status_code=400, detail="Payment method ID is required")
        if not user.stripe_customer_id:
            return {"attached": False, "error": "No Stripe customer ID found"}

        try:
            payment_method = self.gateway.retrieve_payment_method(payment_method_id)
        except stripe.StripeError:
            return {"attached": False, "error": "Payment method not found"}

        card = getattr(payment_method, "card", None)
        return {
            "attached": payment_method.customer == user.stripe_customer_id,
            "paymentMethod": {
                "id": payment_method.id,
                "customer": payment_method.customer,
                "expectedCustomer": user.stripe_customer_id,
                "brand": getattr(card, "brand", None),
                "last4": getattr(card, "last4", None),
            },
        }

    def charge_saved_card(self, data: ChargeSavedCardRequest, user: User) -> dict:
        if not data.amount or not data.paymentMethodId or not data.bookingId:
            raise HTTPException(
                status_code=400, detail="Amount, payment method ID, and booking ID are required"
            )
        if not user.stripe_customer_id:
            raise HTTPException(status_code=400, detail="No Stripe customer found")

        try:
            payment_method = self.gateway.retrieve_payment_method(data.paymentMethodId)
        except stripe.StripeError as e:
            raise HTTPException(status_code=400, detail="Invalid payment method") from e
        if payment_method.customer != user.stripe_customer_id:
            raise HTTPException(status_code=403, detail="Payment method does not belong to this customer")

        booking = self._owned_booking(data.bookingId, user)
        container_name = booking.container_type_name or "Container"
        amount_cents = TEST_CHARGE_CENTS if config.STRIPE_TEST_CHARGE_MODE else to_cents(data.amount)
        if config.STRIPE_TEST_CHARGE_MODE:
            logger.warning(f"🧪 Test charge mode: charging $1.00 instead of ${data.amount:.2f}")

        try:
            intent = self.gateway.create_payment_intent(
                amount=amount_cents,
                currency=data.currency or config.STRIPE_CURRENCY,
                customer=user.stripe_customer_id,
                payment_method=data.paymentMethodId,
                off_session=True,
                confirm=True,
                description=f"Container Rental - {container_name}",
                metadata={
                    "bookingId": booking.id,
                    "userId": str(user.id),
                    "containerType": container_name,
                    "rentalPeriod": f"{booking.start_date} to {booking.end_date}",
                    "serviceType": booking.service_type,
                },
                receipt_email=user.email,
            )
        except stripe.CardError as e:
            logger.warning(f"⚠️ Card declined for booking {booking.short_id}: {e.user_message}")
            raise card_error(e) from e
        except stripe.StripeError as e:
            logger.error(f"❌ Charge failed for booking {booking.short_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to charge card") from e

        if intent.status == "succeeded":
            self._mark_paid(booking, intent.amount / 100, intent.id)
            return {"success": True, "paymentIntentId": intent.id, "status": intent.status}

        if intent.status == "requires_action":
            return {
                "requiresAction": True,
                "clientSecret": intent.client_secret,
                "paymentIntentId": intent.id,
            }

        self._mark_failed(booking, data.amount, f"failed_{int(time.time() * 1000)}")
        raise HTTPException(status_code=400, detail="Payment failed")

    # ------------------------------------------------------------------
    # Admin flows
    # ------------------------------------------------------------------

    async def charge_booking_card(self, data: ChargeBookingCardRequest, admin: User) -> dict:
        """Charge the card saved on a booking: the initial booking charge or an extra fee"""
        if not data.bookingId or not data.amount or data.amount <= 0:
            raise HTTPException(status_code=400, detail="Invalid booking ID or amount")

        booking = self.bookings.get_by_id(self.db, data.bookingId)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        if not booking.payment_method_id:
            raise HTTPException(status_code=400, detail="No payment method saved for this booking")

        try:
            payment_method = self.gateway.retrieve_payment_method(booking.payment_method_id)
        except stripe.StripeError as e:
            logger.error(f"❌ Failed to retrieve payment method: {e}")
            raise HTTPException(status_code=400, detail="Invalid payment method") from e

        customer_id = payment_method.customer
        if not customer_id:
            raise HTTPException(status_code=400, detail="Payment method is not attached to a customer")
        if booking.user and not booking.user.stripe_customer_id:
            booking.user.stripe_customer_id = customer_id
            self.db.commit()

        charge_kind = "Booking" if data.isInitialCharge else "Additional"
        description = data.description or f"{charge_kind} charge for booking #{booking.short_id}"

        try:
            intent = self.gateway.create_payment_intent(
                amount=to_cents(data.amount),
                currency=config.STRIPE_CURRENCY,
                customer=customer_id,
                payment_method=booking.payment_method_id,
                off_session=True,
                confirm=True,
                description=description,
                metadata={
                    "booking_id": booking.id,
                    "charged_by": str(admin.id),
                    "charge_type": "initial_booking_charge" if data.isInitialCharge else "additional_fee",
                },
            )
        except stripe.CardError as e:
            logger.warning(f"⚠️ Card declined for booking {booking.short_id}: {e.user_message}")
            raise card_error(e) from e
        except stripe.StripeError as e:
            logger.error(f"❌ Charge failed for booking {booking.short_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to charge card") from e

        if intent.status != "succeeded":
            self.payments.record(
                self.db,
                booking.id,
                data.amount,
                "failed",
                intent.id,
                f"Failed additional charge: {intent.status}",
            )
            self.db.commit()
            raise HTTPException(status_code=400, detail=f"Payment failed: {intent.status}")

        if data.fees:
            notes = "Individual fees: " + ", ".join(
                f"{fee.description}: ${fee.amount:.2f}" for fee in data.fees
            )
        else:
            notes = data.description or "Additional charge by admin"
        self.payments.record(self.db, booking.id, data.amount, "completed", intent.id, notes)

        if data.isInitialCharge:
            booking.payment_status = PaymentStatus.PAID
            booking.status = BookingStatus.CONFIRMED
        else:
            booking.total_amount = round((booking.total_amount or 0) + data.amount, 2)
        self.db.commit()
        logger.info(f"✅ Charged ${data.amount:.2f} to booking {booking.short_id} ({intent.id})")

        customer_name, customer_email = customer_contact(self.db, booking)
        if customer_name and customer_email:
            try:
                await send_payment_receipt_email(
                    customer_name=customer_name,
                    customer_email=customer_email,
                    booking_id=booking.id,
                    amount=data.amount,
                    description=data.description or f"Charge for booking #{booking.short_id}",
                    transaction_id=intent.id,
                    charged_date=datetime.now().strftime("%B %d, %Y at %I:%M %p"),
                )
                await send_review_request_email(customer_name, customer_email, booking.id)
            except Exception as e:
                logger.error(f"❌ Error sending payment emails for {booking.short_id}: {e}")
        else:
            logger.warning(f"⚠️ No contact for booking {booking.short_id}, skipping receipt email")

        return {
            "success": True,
            "paymentIntent": {
                "id": intent.id,
                "amount": intent.amount / 100,
                "status": intent.status,
            },
            "message": "Additional charge successful",
        }

    def customer_payment_methods(self, user_id: Optional[int]) -> dict:
        if not user_id:
            raise HTTPException(status_code=400, detail="userId parameter required")
        customer = self.db.query(User).filter(User.id == user_id).first()
        if not customer or not customer.stripe_customer_id:
            return {"paymentMethods": []}
        methods = self.gateway.list_card_methods(customer.stripe_customer_id)
        default_id = methods[0].id if methods else None
        return {"paymentMethods": [card_summary(pm, default_id) for pm in methods]}

    def test_charge(self) -> dict:
        """$1.00 PaymentIntent to check the configured keys end to end"""
        try:
            intent = self.gateway.create_payment_intent(
                amount=TEST_CHARGE_CENTS,
                currency="usd",
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            raise HTTPException(
                status_code=500, detail=str(e) or "Failed to create payment intent"
            ) from e
        return {"clientSecret": intent.client_secret}
