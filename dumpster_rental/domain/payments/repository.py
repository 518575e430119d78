"""Payment repository - Database operations for payment records"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking, Payment


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def record(
        db: Session,
        booking_id: str,
        amount: float,
        status: str,
        transaction_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        """Add a payment row; the caller commits together with its booking update"""
        payment = Payment(
            booking_id=booking_id,
            amount=amount,
            payment_method="stripe",
            transaction_id=transaction_id,
            status=status,
            notes=notes,
        )
        db.add(payment)
        return payment

    @staticmethod
    def list_with_bookings(db: Session, limit: int = 200) -> list[Payment]:
        return (
            db.query(Payment)
            .options(joinedload(Payment.booking).joinedload(Booking.user))
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> list[Payment]:
        return (
            db.query(Payment)
            .join(Payment.booking)
            .options(joinedload(Payment.booking).joinedload(Booking.container_type))
            .filter(Booking.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )
