"""Pricing domain schemas"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class PricingBreakdown(BaseModel):
    """Itemised price of a rental, stored on the booking as JSON"""

    containerType: str
    basePrice: float
    includedDays: int
    totalDays: int
    extraDays: int
    extraDaysAmount: float
    extraTonnage: float = 0
    extraTonnageAmount: float = 0
    applianceCount: int = 0
    applianceAmount: float = 0
    distanceMiles: Optional[float] = None
    distanceFee: float = 0
    travelFee: float = 0
    priceAdjustment: float = 0  # negative for discounts
    adjustmentReason: Optional[str] = None
    total: float


class QuoteRequest(BaseModel):
    containerTypeId: int
    startDate: date
    endDate: date
    extraTonnage: float = Field(default=0, ge=0)
    applianceCount: int = Field(default=0, ge=0)
    zipCode: Optional[str] = None


class QuoteResponse(BaseModel):
    breakdown: PricingBreakdown
    distanceError: Optional[str] = None
