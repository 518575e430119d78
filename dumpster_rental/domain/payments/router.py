"""Payments router - Stripe intents, saved cards and admin charges"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    ChargeBookingCardRequest,
    ChargeSavedCardRequest,
    ConfirmPaymentRequest,
    PaymentHistoryItem,
    PaymentIntentRequest,
    PaymentMethodRequest,
)
from .service import PaymentService
from .stripe_gateway import StripeGateway, get_stripe_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])

rate_limit_charges = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="charge")


def get_payment_service(
    db: Session = Depends(get_db), gateway: StripeGateway = Depends(get_stripe_gateway)
) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db, gateway)


@router.get("/payments", response_model=list[PaymentHistoryItem])
async def payment_history(
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Payments made on the caller's bookings, newest first"""
    return service.payment_history(current_user)


@router.post("/api/create-payment-intent")
async def create_payment_intent(
    data: PaymentIntentRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.create_payment_intent(data, current_user)


@router.post("/api/confirm-payment")
async def confirm_payment(
    data: ConfirmPaymentRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Record the result of a card payment confirmed in the browser"""
    return service.confirm_payment(data, current_user)


@router.post("/api/setup-intent")
async def create_setup_intent(
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.create_setup_intent(current_user)


@router.get("/api/payment-methods")
async def list_payment_methods(
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_payment_methods(current_user)


@router.delete("/api/payment-methods")
async def delete_payment_method(
    data: PaymentMethodRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.delete_payment_method(data.paymentMethodId, current_user)


@router.post("/api/verify-payment-method")
async def verify_payment_method(
    data: PaymentMethodRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.verify_payment_method(data.paymentMethodId, current_user)


@router.post("/api/charge-saved-card")
async def charge_saved_card(
    data: ChargeSavedCardRequest,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
    _: None = Depends(rate_limit_charges),
):
    return service.charge_saved_card(data, current_user)


# Admin


@router.post("/api/charge-booking-card")
async def charge_booking_card(
    data: ChargeBookingCardRequest,
    admin: User = Depends(get_current_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.charge_booking_card(data, admin)


@router.get("/api/admin/customer-payment-methods")
async def customer_payment_methods(
    userId: Optional[int] = Query(None),
    _: User = Depends(get_current_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return service.customer_payment_methods(userId)


@router.post("/api/test-charge")
async def test_charge(
    _: User = Depends(get_current_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return service.test_charge()
