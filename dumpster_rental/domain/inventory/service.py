"""Inventory service - Container types and date availability"""

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ContainerType
from .repository import ContainerTypeRepository
from .schemas import ContainerTypeCreate, ContainerTypeUpdate

logger = logging.getLogger(__name__)

AVAILABILITY_HORIZON_DAYS = 365


class InventoryService:
    """Service layer for container type business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContainerTypeRepository()

    def list_container_types(self) -> list[ContainerType]:
        return self.repo.list_all(self.db)

    def get_container_type(self, container_type_id: int) -> ContainerType:
        container = self.repo.get_by_id(self.db, container_type_id)
        if not container:
            raise HTTPException(status_code=404, detail="Container type not found")
        return container

    def create_container_type(self, data: ContainerTypeCreate) -> ContainerType:
        container = self.repo.create(self.db, **data.model_dump())
        logger.info(f"📦 Container type created: {container.name}")
        return container

    def update_container_type(self, container_type_id: int, data: ContainerTypeUpdate) -> ContainerType:
        container = self.get_container_type(container_type_id)
        return self.repo.update(self.db, container, **data.model_dump(exclude_unset=True))

    def delete_container_type(self, container_type_id: int) -> None:
        container = self.get_container_type(container_type_id)
        if self.repo.count_bookings(self.db, container_type_id):
            raise HTTPException(
                status_code=409,
                detail="Container type has bookings and cannot be deleted",
            )
        self.repo.delete(self.db, container)
        logger.info(f"🗑️ Container type deleted: {container_type_id}")

    def _booked_per_day(self, container_type_id: int, start: date, end: date) -> Counter:
        """Number of active bookings holding a unit on each day of [start, end]"""
        per_day: Counter = Counter()
        for booking in self.repo.overlapping_bookings(self.db, container_type_id, start, end):
            day = max(booking.start_date, start)
            last = min(booking.end_date, end)
            while day <= last:
                per_day[day] += 1
                day += timedelta(days=1)
        return per_day

    def availability(self, container_type_id: int, start_date: date, end_date: date) -> dict:
        if end_date < start_date:
            raise HTTPException(status_code=400, detail="End date must be on or after the start date")
        container = self.get_container_type(container_type_id)
        # Units free on every day of the range, so the busiest day decides
        per_day = self._booked_per_day(container_type_id, start_date, end_date)
        booked = max(per_day.values(), default=0)
        return {
            "containerTypeId": container.id,
            "startDate": start_date,
            "endDate": end_date,
            "totalQuantity": container.available_quantity,
            "booked": booked,
            "available": max(0, container.available_quantity - booked),
        }

    def unavailable_dates(self, container_type_id: int, today: Optional[date] = None) -> list[date]:
        """Days in the next year on which every unit of the container type is booked"""
        container = self.get_container_type(container_type_id)
        start = today or date.today()
        end = start + timedelta(days=AVAILABILITY_HORIZON_DAYS)

        if container.available_quantity <= 0:
            return [start + timedelta(days=offset) for offset in range(AVAILABILITY_HORIZON_DAYS + 1)]

        per_day = self._booked_per_day(container_type_id, start, end)
        return sorted(day for day, count in per_day.items() if count >= container.available_quantity)
