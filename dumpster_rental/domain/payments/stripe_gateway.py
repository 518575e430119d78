"""
Thin wrapper over the Stripe SDK.

Every Stripe call the API makes goes through StripeGateway so that the payment flows
can be exercised against a fake in tests. Methods return Stripe objects as-is and let
stripe errors propagate.
"""

import logging
from typing import Optional

import stripe
from fastapi import HTTPException

from ... import config

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, api_key: str):
        stripe.api_key = api_key

    # Customers

    def create_customer(
        self,
        email: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        metadata: Optional[dict] = None,
    ):
        params = {"email": email, "metadata": metadata or {}}
        if name:
            params["name"] = name
        if phone:
            params["phone"] = phone
        customer = stripe.Customer.create(**params)
        logger.info(f"💳 Stripe customer created: {customer.id}")
        return customer

    def find_customer_by_email(self, email: str):
        customers = stripe.Customer.list(email=email, limit=1)
        return customers.data[0] if customers.data else None

    def set_default_payment_method(self, customer_id: str, payment_method_id: str):
        return stripe.Customer.modify(
            customer_id,
            invoice_settings={"default_payment_method": payment_method_id},
        )

    # Payment methods

    def retrieve_payment_method(self, payment_method_id: str):
        return stripe.PaymentMethod.retrieve(payment_method_id)

    def list_card_methods(self, customer_id: str) -> list:
        return list(stripe.PaymentMethod.list(customer=customer_id, type="card").data)

    def attach_payment_method(self, payment_method_id: str, customer_id: str):
        return stripe.PaymentMethod.attach(payment_method_id, customer=customer_id)

    def detach_payment_method(self, payment_method_id: str):
        return stripe.PaymentMethod.detach(payment_method_id)

    # Intents

    def create_payment_intent(self, **params):
        intent = stripe.PaymentIntent.create(**params)
        logger.info(f"💳 PaymentIntent {intent.id}: {intent.status}")
        return intent

    def retrieve_payment_intent(self, payment_intent_id: str):
        return stripe.PaymentIntent.retrieve(payment_intent_id)

    def create_setup_intent(self, customer_id: str):
        return stripe.SetupIntent.create(
            customer=customer_id,
            payment_method_types=["card"],
            usage="off_session",
        )


_gateway: Optional[StripeGateway] = None


def get_stripe_gateway() -> StripeGateway:
    """FastAPI dependency; 500 when no Stripe key is configured"""
    global _gateway
    if _gateway is None:
        if not config.STRIPE_SECRET_KEY:
            logger.error("❌ STRIPE_SECRET_KEY not configured")
            raise HTTPException(status_code=500, detail="Payment processing not configured")
        _gateway = StripeGateway(config.STRIPE_SECRET_KEY)
    return _gateway


def card_summary(payment_method, default_id: Optional[str] = None) -> dict:
    card = getattr(payment_method, "card", None)
    return {
        "id": payment_method.id,
        "brand": getattr(card, "brand", None),
        "last4": getattr(card, "last4", None),
        "exp_month": getattr(card, "exp_month", None),
        "exp_year": getattr(card, "exp_year", None),
        "isDefault": payment_method.id == default_id,
    }
