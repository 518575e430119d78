"""Payment link domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class PaymentLinkBooking(BaseModel):
    id: str
    containerType: Optional[str] = None
    startDate: date
    endDate: date
    serviceType: str
    deliveryAddress: Optional[str] = None
    totalAmount: float
    status: str
    pricingBreakdown: Optional[dict] = None


class PaymentLinkResponse(BaseModel):
    token: str
    status: str
    customerName: str
    customerEmail: str
    customerPhone: Optional[str] = None
    expiresAt: datetime
    completedAt: Optional[datetime] = None
    booking: PaymentLinkBooking


class CompletePaymentLinkRequest(BaseModel):
    token: Optional[str] = None
    paymentMethodId: Optional[str] = None
    signatureUrl: Optional[str] = None


class ExpiredLink(BaseModel):
    id: int
    token: str
    bookingId: str


class ExpireLinksResponse(BaseModel):
    success: bool = True
    message: str
    expiredCount: int
    expiredLinks: list[ExpiredLink] = []
