"""Pricing router - public price quotes for the booking form"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ..distance.service import calculate_distance_fee
from ..inventory.repository import ContainerTypeRepository
from .calculator import calculate_pricing, extra_tonnage_fee
from .schemas import QuoteRequest, QuoteResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/quote", response_model=QuoteResponse)
async def quote(data: QuoteRequest, db: Session = Depends(get_db)):
    """Price a rental before booking; includes the distance fee when a ZIP code is given"""
    container = ContainerTypeRepository.get_by_id(db, data.containerTypeId)
    if not container:
        raise HTTPException(status_code=404, detail="Container type not found")

    distance_miles = None
    distance_fee = 0
    distance_error = None
    if data.zipCode:
        fee = await calculate_distance_fee(data.zipCode)
        distance_error = fee.get("error")
        if not distance_error:
            distance_miles = fee["distanceMiles"]
            distance_fee = fee["distanceFee"]

    try:
        breakdown = calculate_pricing(
            container_type=container.name,
            base_price=container.price_per_day,
            start_date=data.startDate,
            end_date=data.endDate,
            extra_tonnage=data.extraTonnage,
            appliance_count=data.applianceCount,
            distance_miles=distance_miles,
            distance_fee=distance_fee,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return QuoteResponse(breakdown=breakdown, distanceError=distance_error)


@router.get("/extra-tonnage-fee")
async def get_extra_tonnage_fee(tons: float = Query(..., gt=0)):
    """Fee line for weight hauled beyond the included allowance"""
    return extra_tonnage_fee(tons)
