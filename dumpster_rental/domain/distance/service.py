"""Distance service - Google Distance Matrix lookups and the delivery distance fee"""

import logging
from typing import Optional

import httpx
from fastapi import HTTPException

from ... import config
from ...cache import Cache
from ...shared.validators import normalize_zipcode

logger = logging.getLogger(__name__)

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
METERS_PER_MILE = 1609.34
FREE_DISTANCE_MILES = 20
PRICE_PER_MILE = 1.5
CACHE_SECONDS = 7 * 24 * 3600

distance_cache = Cache("distance")


async def fetch_distance_matrix(params: dict) -> dict:
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(DISTANCE_MATRIX_URL, params=params)
    return response.json()


async def lookup_distance(origin_zip: Optional[str], destination_zip: Optional[str]) -> dict:
    """
    Driving distance between two ZIP codes.

    Returns distanceMiles (1 decimal), distanceText, durationText, originAddress and
    destinationAddress. Raises HTTPException (400/500) the same way the API route reports it.
    """
    if not origin_zip or not destination_zip:
        raise HTTPException(status_code=400, detail="Origin and destination zip codes are required")

    if not config.GOOGLE_MAPS_API_KEY:
        logger.error("❌ GOOGLE_MAPS_API_KEY is not set")
        raise HTTPException(status_code=500, detail="Distance calculation service not configured")

    cache_key = f"{origin_zip.strip()}:{destination_zip.strip()}"
    cached = distance_cache.get(cache_key)
    if cached:
        return cached

    params = {
        "origins": f"{origin_zip}, USA",
        "destinations": f"{destination_zip}, USA",
        "units": "imperial",
        "key": config.GOOGLE_MAPS_API_KEY,
    }

    try:
        data = await fetch_distance_matrix(params)
    except Exception as e:
        logger.error(f"❌ Distance Matrix request failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to calculate distance") from e

    if data.get("status") != "OK":
        logger.error(
            f"❌ Distance Matrix returned {data.get('status')}: {data.get('error_message', '')}"
        )
        raise HTTPException(status_code=500, detail="Failed to calculate distance")

    rows = data.get("rows") or [{}]
    elements = rows[0].get("elements") or [{}]
    element = elements[0]
    if element.get("status") != "OK":
        logger.warning(f"⚠️ No route to {destination_zip}: {element.get('status')}")
        raise HTTPException(status_code=400, detail="Could not calculate distance for this location")

    result = {
        "distanceMiles": round(element["distance"]["value"] / METERS_PER_MILE, 1),
        "distanceText": element["distance"]["text"],
        "durationText": element["duration"]["text"],
        "originAddress": (data.get("origin_addresses") or [None])[0],
        "destinationAddress": (data.get("destination_addresses") or [None])[0],
    }
    logger.info(f"📍 {origin_zip} → {destination_zip}: {result['distanceMiles']} miles")
    distance_cache.set(cache_key, result, ttl=CACHE_SECONDS)
    return result


def distance_fee_for_miles(distance_miles: float) -> dict:
    extra_miles = max(0.0, distance_miles - FREE_DISTANCE_MILES)
    return {
        "distanceMiles": round(distance_miles, 1),
        "extraMiles": round(extra_miles, 1),
        "distanceFee": round(extra_miles * PRICE_PER_MILE, 2),
        "isWithinFreeRange": distance_miles <= FREE_DISTANCE_MILES,
    }


async def calculate_distance_fee(destination_zip: Optional[str]) -> dict:
    """
    Delivery fee from the yard (BASE_ZIP_CODE): first 20 miles free, then $1.50/mile.

    Never raises: an invalid ZIP or a failed lookup gives a zero fee plus an ``error``.
    """
    result = {"distanceMiles": 0, "extraMiles": 0, "distanceFee": 0, "isWithinFreeRange": True}

    zipcode = normalize_zipcode(destination_zip)
    if not zipcode:
        return {**result, "error": "Invalid zip code"}

    try:
        distance = await lookup_distance(config.BASE_ZIP_CODE, zipcode)
    except HTTPException as e:
        return {**result, "error": e.detail}

    return distance_fee_for_miles(distance["distanceMiles"])
