"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class BookingCreate(BaseModel):
    """Schema for a customer placing a booking online"""

    containerTypeId: int
    startDate: date
    endDate: date
    serviceType: str = "delivery"
    pickupTime: Optional[str] = None
    deliveryAddress: Optional[str] = None
    customerAddress: Optional[str] = None
    zipCode: Optional[str] = None
    extraTonnage: float = Field(default=0, ge=0)
    applianceCount: int = Field(default=0, ge=0)
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("serviceType")
    @classmethod
    def validate_service_type(cls, v):
        if v not in ("delivery", "pickup"):
            raise ValueError("serviceType must be 'delivery' or 'pickup'")
        return v


class BookingResponse(BaseModel):
    id: str
    user_id: int
    container_type_id: int
    container_type_name: Optional[str] = None
    start_date: date
    end_date: date
    service_type: str
    pickup_time: Optional[str] = None
    customer_address: Optional[str] = None
    delivery_address: Optional[str] = None
    total_amount: float
    distance_miles: Optional[float] = None
    distance_fee: Optional[float] = None
    travel_fee: Optional[float] = None
    price_adjustment: Optional[float] = None
    adjustment_reason: Optional[str] = None
    pricing_breakdown: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    status: str
    payment_status: str
    payment_method_id: Optional[str] = None
    signature_img_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GuestInfoRequest(BaseModel):
    bookingId: Optional[str] = None
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    customerPhone: Optional[str] = None
    customerAddress: Optional[str] = None


class GuestInquiryRequest(BaseModel):
    """Booking request from a visitor without an account"""

    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    phone: Optional[str] = None
    containerTypeId: Optional[int] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    serviceType: Optional[str] = "delivery"
    deliveryAddress: Optional[str] = None
    notes: Optional[str] = None


class BookingEmailRequest(BaseModel):
    bookingId: Optional[str] = None
    customerEmail: Optional[str] = None
    customerName: Optional[str] = None
    containerType: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    serviceType: Optional[str] = None
    totalAmount: Optional[float] = None
    deliveryAddress: Optional[str] = None
    pickupTime: Optional[str] = None
    notes: Optional[str] = None
