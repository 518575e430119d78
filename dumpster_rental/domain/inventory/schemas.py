"""Inventory domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class ContainerTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    size: Optional[str] = None
    description: Optional[str] = None
    price_per_day: float = Field(gt=0)
    available_quantity: int = Field(default=0, ge=0)


class ContainerTypeUpdate(BaseModel):
    name: Optional[str] = None
    size: Optional[str] = None
    description: Optional[str] = None
    price_per_day: Optional[float] = Field(default=None, gt=0)
    available_quantity: Optional[int] = Field(default=None, ge=0)


class ContainerTypeResponse(BaseModel):
    id: int
    name: str
    size: Optional[str] = None
    description: Optional[str] = None
    price_per_day: float
    available_quantity: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    containerTypeId: int
    startDate: date
    endDate: date
    totalQuantity: int
    booked: int
    available: int


class UnavailableDatesResponse(BaseModel):
    containerTypeId: int
    unavailableDates: list[date]
