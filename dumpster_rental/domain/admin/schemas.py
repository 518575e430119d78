"""Admin domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PhoneBookingRequest(BaseModel):
    """Booking taken over the phone; the customer saves a card through a payment link"""

    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    customerPhone: Optional[str] = None
    containerTypeId: Optional[int] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    serviceType: Optional[str] = None
    pickupTime: Optional[str] = None
    customerAddress: Optional[str] = None
    deliveryAddress: Optional[str] = None
    extraTonnage: float = Field(default=0, ge=0)
    applianceCount: int = Field(default=0, ge=0)
    travelFee: float = Field(default=0, ge=0)
    priceAdjustment: float = 0
    adjustmentReason: Optional[str] = None
    notes: Optional[str] = None


class CancelBookingRequest(BaseModel):
    bookingId: Optional[str] = None
    reason: Optional[str] = None


class ExtendBookingRequest(BaseModel):
    bookingId: Optional[str] = None
    newEndDate: Optional[date] = None


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in ("client", "admin"):
            raise ValueError("role must be 'client' or 'admin'")
        return v


class AdminBookingResponse(BaseModel):
    id: str
    user_id: int
    container_type_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    start_date: date
    end_date: date
    service_type: str
    pickup_time: Optional[str] = None
    customer_address: Optional[str] = None
    delivery_address: Optional[str] = None
    total_amount: float
    pricing_breakdown: Optional[dict] = None
    notes: Optional[str] = None
    status: str
    payment_status: str
    payment_method_id: Optional[str] = None
    signature_img_url: Optional[str] = None
    is_phone_booking: bool = False
    created_at: Optional[datetime] = None


class AdminUserResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_admin: bool
    stripe_customer_id: Optional[str] = None
    booking_count: int = 0
    created_at: Optional[datetime] = None


class AdminPaymentResponse(BaseModel):
    id: int
    booking_id: str
    amount: float
    transaction_id: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    container_type_name: Optional[str] = None


class RecentBooking(BaseModel):
    id: str
    customer_name: Optional[str] = None
    container_type_name: Optional[str] = None
    start_date: date
    status: str
    total_amount: float


class AdminStats(BaseModel):
    totalBookings: int
    pendingBookings: int
    totalUsers: int
    totalRevenue: float
    recentBookings: list[RecentBooking]
