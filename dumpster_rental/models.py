import secrets
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_booking_id():
    """Bookings are addressed by UUID; emails show the first 8 characters"""
    return str(uuid.uuid4())


def generate_payment_link_token():
    return secrets.token_urlsafe(32)


class BookingStatus:
    PENDING = "pending"
    AWAITING_CARD = "awaiting_card"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentLinkStatus:
    PENDING = "pending"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ConversationStatus:
    ACTIVE = "active"
    CLOSED = "closed"

    ALL = (ACTIVE, CLOSED)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Null for profiles created by admins for phone customers who never signed in
    firebase_uid = Column(String(255), unique=True, index=True, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)  # digits only
    company = Column(String(255), nullable=True)
    street_address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(10), nullable=True)
    role = Column(String(20), default="client", nullable=False)  # client, admin
    is_admin = Column(Boolean, default=False, nullable=False)
    stripe_customer_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="user")

    @property
    def has_admin_access(self) -> bool:
        return self.role == "admin" or bool(self.is_admin)


class ContainerType(Base):
    __tablename__ = "container_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)  # e.g. "20 Yard"
    size = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    # Flat base price; covers the first INCLUDED_DAYS of the rental
    price_per_day = Column(Float, nullable=False)
    available_quantity = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="container_type")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_booking_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    container_type_id = Column(
        Integer, ForeignKey("container_types.id"), nullable=False, index=True
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    service_type = Column(String(50), nullable=False)  # delivery, pickup
    pickup_time = Column(String(50), nullable=True)
    customer_address = Column(String(500), nullable=True)
    delivery_address = Column(String(500), nullable=True)
    total_amount = Column(Float, nullable=False, default=0)
    extra_tonnage = Column(Float, nullable=True)
    appliance_count = Column(Integer, nullable=True)
    travel_fee = Column(Float, nullable=True)
    price_adjustment = Column(Float, nullable=True)
    adjustment_reason = Column(String(500), nullable=True)
    distance_miles = Column(Float, nullable=True)
    distance_fee = Column(Float, nullable=True)
    pricing_breakdown = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(50), default=BookingStatus.PENDING, nullable=False, index=True)
    payment_status = Column(String(50), default=PaymentStatus.PENDING, nullable=False)
    payment_method_id = Column(String(255), nullable=True)  # Stripe pm_...
    signature_img_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    container_type = relationship("ContainerType", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")
    payment_links = relationship(
        "PaymentLink", back_populates="booking", cascade="all, delete-orphan"
    )
    guest_info = relationship(
        "PhoneBookingGuest", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @property
    def container_type_name(self):
        return self.container_type.name if self.container_type else None


class PaymentLink(Base):
    __tablename__ = "payment_links"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(64), unique=True, index=True, default=generate_payment_link_token)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    customer_email = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    status = Column(String(20), default=PaymentLinkStatus.PENDING, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="payment_links")


class PhoneBookingGuest(Base):
    """Contact details for bookings recorded under the shared guest profile"""

    __tablename__ = "phone_booking_guests"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), unique=True, nullable=False)
    customer_name = Column(String(255), nullable=False, default="Guest")
    customer_email = Column(String(255), nullable=False, default="")
    customer_phone = Column(String(50), nullable=False, default="")
    customer_address = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())

    booking = relationship("Booking", back_populates="guest_info")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(50), default="stripe", nullable=False)
    transaction_id = Column(String(255), nullable=True)  # Stripe PaymentIntent id
    status = Column(String(20), nullable=False)  # completed, failed
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    booking = relationship("Booking", back_populates="payments")


class Conversation(Base):
    """Support chat thread between a customer and the office"""

    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # assigned staff member
    subject = Column(String(255), default="Support Chat", nullable=False)
    status = Column(String(20), default=ConversationStatus.ACTIVE, nullable=False, index=True)
    last_message_at = Column(DateTime, server_default=func.now())
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", foreign_keys=[user_id])
    admin = relationship("User", foreign_keys=[admin_id])
    messages = relationship(
        "Message", back_populates="conversation", order_by="Message.id", cascade="all, delete-orphan"
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    message_type = Column(String(20), default="text", nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")
