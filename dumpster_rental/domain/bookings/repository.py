"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking, PhoneBookingGuest


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.container_type), joinedload(Booking.user))
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def get_for_user(db: Session, booking_id: str, user_id: int) -> Optional[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.container_type))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
            .all()
        )

    @staticmethod
    def create(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_guest_info(db: Session, booking_id: str) -> Optional[PhoneBookingGuest]:
        return db.query(PhoneBookingGuest).filter(PhoneBookingGuest.booking_id == booking_id).first()

    @staticmethod
    def save_guest_info(db: Session, booking_id: str, **guest_data) -> PhoneBookingGuest:
        guest = PhoneBookingGuest(booking_id=booking_id, **guest_data)
        db.add(guest)
        db.commit()
        db.refresh(guest)
        return guest
