"""Payment link repository - Database operations for payment links"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking, PaymentLink, PaymentLinkStatus


class PaymentLinkRepository:
    """Repository for payment link database operations"""

    @staticmethod
    def get_by_token(db: Session, token: str) -> Optional[PaymentLink]:
        return (
            db.query(PaymentLink)
            .options(joinedload(PaymentLink.booking).joinedload(Booking.container_type))
            .filter(PaymentLink.token == token)
            .first()
        )

    @staticmethod
    def create(db: Session, **link_data) -> PaymentLink:
        """Add a link without committing; phone bookings commit it with their booking"""
        link = PaymentLink(**link_data)
        db.add(link)
        db.flush()
        return link

    @staticmethod
    def list_expired_pending(db: Session, now: datetime) -> list[PaymentLink]:
        return (
            db.query(PaymentLink)
            .filter(
                PaymentLink.status == PaymentLinkStatus.PENDING,
                PaymentLink.expires_at < now,
            )
            .all()
        )

    @staticmethod
    def list_with_phone(db: Session) -> list[PaymentLink]:
        return (
            db.query(PaymentLink)
            .options(joinedload(PaymentLink.booking).joinedload(Booking.user))
            .filter(PaymentLink.customer_phone.isnot(None), PaymentLink.customer_phone != "")
            .all()
        )
