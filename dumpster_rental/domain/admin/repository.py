"""Admin repository - Dashboard queries across bookings, users and payments"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Booking, BookingStatus, Payment, User


def _booking_query(db: Session):
    return db.query(Booking).options(
        joinedload(Booking.container_type),
        joinedload(Booking.user),
        joinedload(Booking.guest_info),
    )


class AdminRepository:
    """Repository for admin dashboard queries"""

    @staticmethod
    def list_bookings(
        db: Session, status: Optional[str] = None, payment_status: Optional[str] = None
    ) -> list[Booking]:
        query = _booking_query(db)
        if status:
            query = query.filter(Booking.status == status)
        if payment_status:
            query = query.filter(Booking.payment_status == payment_status)
        return query.order_by(Booking.created_at.desc()).all()

    @staticmethod
    def bookings_between(db: Session, start: date, end: date) -> list[Booking]:
        """Non-cancelled bookings overlapping [start, end]"""
        return (
            _booking_query(db)
            .filter(
                Booking.status != BookingStatus.CANCELLED,
                Booking.start_date <= end,
                Booking.end_date >= start,
            )
            .order_by(Booking.start_date)
            .all()
        )

    @staticmethod
    def recent_bookings(db: Session, limit: int = 5) -> list[Booking]:
        return _booking_query(db).order_by(Booking.created_at.desc()).limit(limit).all()

    @staticmethod
    def count_bookings(db: Session, status: Optional[str] = None) -> int:
        query = db.query(func.count(Booking.id))
        if status:
            query = query.filter(Booking.status == status)
        return query.scalar() or 0

    @staticmethod
    def count_users(db: Session) -> int:
        return db.query(func.count(User.id)).scalar() or 0

    @staticmethod
    def completed_revenue(db: Session) -> float:
        total = db.query(func.sum(Payment.amount)).filter(Payment.status == "completed").scalar()
        return round(total or 0, 2)

    @staticmethod
    def users_with_booking_counts(db: Session) -> list[tuple[User, int]]:
        return (
            db.query(User, func.count(Booking.id))
            .outerjoin(Booking, Booking.user_id == User.id)
            .group_by(User.id)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()
