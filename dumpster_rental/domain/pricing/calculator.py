"""
Rental price calculation.

A container's base price covers the first INCLUDED_DAYS of the rental (start and end dates
both count). Every later day, every extra ton and every appliance is a flat line item on top;
distance fee, travel fee and a signed admin adjustment are added last.
"""

from datetime import date
from typing import Optional

from .schemas import PricingBreakdown

INCLUDED_DAYS = 3
EXTRA_DAY_RATE = 25.0
EXTRA_TON_RATE = 125.0
APPLIANCE_RATE = 25.0


def rental_days(start_date: date, end_date: date) -> int:
    """Inclusive day count; raises ValueError when the range is reversed"""
    if end_date < start_date:
        raise ValueError("End date must be on or after the start date")
    return (end_date - start_date).days + 1


def _total(
    base_price: float,
    extra_days_amount: float,
    extra_tonnage_amount: float,
    appliance_amount: float,
    distance_fee: float,
    travel_fee: float,
    price_adjustment: float,
) -> float:
    total = (
        base_price
        + extra_days_amount
        + extra_tonnage_amount
        + appliance_amount
        + distance_fee
        + travel_fee
        + price_adjustment
    )
    return max(0.0, round(total, 2))


def calculate_pricing(
    container_type: str,
    base_price: float,
    start_date: date,
    end_date: date,
    extra_tonnage: float = 0,
    appliance_count: int = 0,
    distance_miles: Optional[float] = None,
    distance_fee: float = 0,
    travel_fee: float = 0,
    price_adjustment: float = 0,
    adjustment_reason: Optional[str] = None,
) -> PricingBreakdown:
    total_days = rental_days(start_date, end_date)
    extra_days = max(0, total_days - INCLUDED_DAYS)
    extra_tonnage = max(0.0, extra_tonnage or 0)
    appliance_count = max(0, appliance_count or 0)

    extra_days_amount = extra_days * EXTRA_DAY_RATE
    extra_tonnage_amount = round(extra_tonnage * EXTRA_TON_RATE, 2)
    appliance_amount = appliance_count * APPLIANCE_RATE

    return PricingBreakdown(
        containerType=container_type,
        basePrice=base_price,
        includedDays=INCLUDED_DAYS,
        totalDays=total_days,
        extraDays=extra_days,
        extraDaysAmount=extra_days_amount,
        extraTonnage=extra_tonnage,
        extraTonnageAmount=extra_tonnage_amount,
        applianceCount=appliance_count,
        applianceAmount=appliance_amount,
        distanceMiles=distance_miles,
        distanceFee=distance_fee or 0,
        travelFee=travel_fee or 0,
        priceAdjustment=price_adjustment or 0,
        adjustmentReason=adjustment_reason or None,
        total=_total(
            base_price,
            extra_days_amount,
            extra_tonnage_amount,
            appliance_amount,
            distance_fee or 0,
            travel_fee or 0,
            price_adjustment or 0,
        ),
    )


def recalculate_for_days(breakdown: dict, total_days: int) -> dict:
    """
    Stored breakdown re-priced for a new rental length (booking extension).
    Only the day-based lines and the total change.
    """
    included_days = breakdown.get("includedDays") or INCLUDED_DAYS
    extra_days = max(0, total_days - included_days)
    extra_days_amount = extra_days * EXTRA_DAY_RATE

    updated = dict(breakdown)
    updated.update(
        totalDays=total_days,
        extraDays=extra_days,
        extraDaysAmount=extra_days_amount,
        total=_total(
            breakdown.get("basePrice") or 0,
            extra_days_amount,
            breakdown.get("extraTonnageAmount") or 0,
            breakdown.get("applianceAmount") or 0,
            breakdown.get("distanceFee") or 0,
            breakdown.get("travelFee") or 0,
            breakdown.get("priceAdjustment") or 0,
        ),
    )
    return updated


def extension_cost(additional_days: int) -> float:
    return additional_days * EXTRA_DAY_RATE


def extra_tonnage_fee(tons: float) -> dict:
    """Fee line the admin adds when the hauled weight exceeds the allowance"""
    tons_label = f"{tons:g}"
    return {
        "description": f"Extra tonnage ({tons_label} tons @ ${EXTRA_TON_RATE:.0f}/ton)",
        "amount": round(tons * EXTRA_TON_RATE, 2),
    }
