"""Payment link router - public card collection and the expiry sweep"""

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ... import config
from ...database import get_db
from ..payments.stripe_gateway import StripeGateway, get_stripe_gateway
from .schemas import CompletePaymentLinkRequest, ExpireLinksResponse, PaymentLinkResponse
from .service import PaymentLinkService, expire_old_links

router = APIRouter(prefix="/api/payment-link", tags=["Payment Links"])


def get_payment_link_service(
    db: Session = Depends(get_db), gateway: StripeGateway = Depends(get_stripe_gateway)
) -> PaymentLinkService:
    """Dependency injection for PaymentLinkService"""
    return PaymentLinkService(db, gateway)


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Bearer CRON_SECRET check, skipped when no secret is configured"""
    if not config.CRON_SECRET:
        return
    if not authorization or not secrets.compare_digest(authorization, f"Bearer {config.CRON_SECRET}"):
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.api_route("/expire-old", methods=["GET", "POST"], response_model=ExpireLinksResponse)
async def expire_old(_: None = Depends(verify_cron_secret), db: Session = Depends(get_db)):
    return expire_old_links(db)


@router.post("/complete")
async def complete_payment_link(
    data: CompletePaymentLinkRequest,
    service: PaymentLinkService = Depends(get_payment_link_service),
):
    return await service.complete(data)


@router.get("/{token}", response_model=PaymentLinkResponse)
async def get_payment_link(token: str, db: Session = Depends(get_db)):
    return PaymentLinkService(db).get_link(token)
