"""Payment domain schemas

Request fields are optional so that missing values are reported as 400s with the
same messages the booking front end already shows.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class PaymentIntentRequest(BaseModel):
    amount: Optional[float] = None
    bookingId: Optional[str] = None


class PaymentMethodRequest(BaseModel):
    paymentMethodId: Optional[str] = None


class ChargeSavedCardRequest(BaseModel):
    amount: Optional[float] = None
    paymentMethodId: Optional[str] = None
    bookingId: Optional[str] = None
    currency: Optional[str] = None


class ConfirmPaymentRequest(BaseModel):
    bookingId: Optional[str] = None
    paymentIntentId: Optional[str] = None


class FeeItem(BaseModel):
    description: str
    amount: float


class ChargeBookingCardRequest(BaseModel):
    bookingId: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    isInitialCharge: bool = False
    fees: list[FeeItem] = []


class PaymentResponse(BaseModel):
    id: int
    booking_id: str
    amount: float
    payment_method: str
    transaction_id: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentHistoryItem(BaseModel):
    id: int
    booking_id: str
    amount: float
    status: str
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    container_type_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    booking_status: Optional[str] = None
