"""Distance router - public distance lookups used by the booking form"""

import os

from fastapi import APIRouter, Depends

from ...rate_limiter import create_rate_limiter
from .schemas import DistanceFeeResponse, DistanceRequest, DistanceResponse
from .service import calculate_distance_fee, lookup_distance

router = APIRouter(prefix="/api", tags=["Distance"])

rate_limit_distance = create_rate_limiter(
    limit=int(os.getenv("DISTANCE_RPM", "30")),
    window_seconds=60,
    key_prefix="distance",
    use_ip=True,
)


@router.post("/calculate-distance", response_model=DistanceResponse)
async def calculate_distance(data: DistanceRequest, _: None = Depends(rate_limit_distance)):
    return await lookup_distance(data.originZip, data.destinationZip)


@router.get("/distance-fee/{zipcode}", response_model=DistanceFeeResponse)
async def distance_fee(zipcode: str, _: None = Depends(rate_limit_distance)):
    """Delivery distance fee for a ZIP code (zero fee plus error when it cannot be computed)"""
    return await calculate_distance_fee(zipcode)
