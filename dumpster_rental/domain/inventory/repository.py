"""Inventory repository - Database operations for container types"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, BookingStatus, ContainerType


class ContainerTypeRepository:
    """Repository for container type database operations"""

    @staticmethod
    def list_all(db: Session) -> list[ContainerType]:
        return db.query(ContainerType).order_by(ContainerType.price_per_day.asc()).all()

    @staticmethod
    def get_by_id(db: Session, container_type_id: int) -> Optional[ContainerType]:
        return db.query(ContainerType).filter(ContainerType.id == container_type_id).first()

    @staticmethod
    def create(db: Session, **data) -> ContainerType:
        container = ContainerType(**data)
        db.add(container)
        db.commit()
        db.refresh(container)
        return container

    @staticmethod
    def update(db: Session, container: ContainerType, **updates) -> ContainerType:
        for key, value in updates.items():
            if value is not None and hasattr(container, key):
                setattr(container, key, value)
        db.commit()
        db.refresh(container)
        return container

    @staticmethod
    def delete(db: Session, container: ContainerType) -> None:
        db.delete(container)
        db.commit()

    @staticmethod
    def count_bookings(db: Session, container_type_id: int) -> int:
        return db.query(Booking).filter(Booking.container_type_id == container_type_id).count()

    @staticmethod
    def overlapping_bookings(
        db: Session, container_type_id: int, start_date: date, end_date: date
    ) -> list[Booking]:
        """Non-cancelled bookings of a container type touching the inclusive date range"""
        return (
            db.query(Booking)
            .filter(
                Booking.container_type_id == container_type_id,
                Booking.status != BookingStatus.CANCELLED,
                Booking.start_date <= end_date,
                Booking.end_date >= start_date,
            )
            .all()
        )
