"""Distance domain schemas"""

from typing import Optional

from pydantic import BaseModel


class DistanceRequest(BaseModel):
    originZip: Optional[str] = None
    destinationZip: Optional[str] = None


class DistanceResponse(BaseModel):
    distanceMiles: float
    distanceText: str
    durationText: str
    originAddress: Optional[str] = None
    destinationAddress: Optional[str] = None


class DistanceFeeResponse(BaseModel):
    distanceMiles: float
    extraMiles: float
    distanceFee: float
    isWithinFreeRange: bool
    error: Optional[str] = None
