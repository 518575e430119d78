"""
Service Areas API Routes

Cities we deliver to and ZIP code lookups for the booking form.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...shared.validators import normalize_zipcode
from .data import CITIES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/service-areas", tags=["Service Areas"])

_CITIES_BY_SLUG = {city["slug"]: city for city in CITIES}
_CITY_BY_ZIP = {zipcode: city for city in CITIES for zipcode in city["zip_codes"]}


class City(BaseModel):
    slug: str
    name: str
    county: str
    zip_codes: list[str]
    population: str
    description: str
    highlights: list[str]
    neighborhoods: list[str] = []


class ZipLookupResponse(BaseModel):
    zipcode: str
    served: bool
    city: Optional[City] = None


def get_city_by_slug(slug: str) -> Optional[dict]:
    return _CITIES_BY_SLUG.get(slug)


def get_city_by_zip(zipcode: str) -> Optional[dict]:
    return _CITY_BY_ZIP.get(zipcode)


@router.get("", response_model=list[City])
async def list_service_areas():
    return CITIES


@router.get("/lookup/{zipcode}", response_model=ZipLookupResponse)
async def lookup_zipcode(zipcode: str):
    """Which city (if any) serves a ZIP code"""
    normalized = normalize_zipcode(zipcode)
    if not normalized:
        raise HTTPException(status_code=400, detail="Invalid zip code")
    city = get_city_by_zip(normalized)
    return {"zipcode": normalized, "served": city is not None, "city": city}


@router.get("/{slug}", response_model=City)
async def get_service_area(slug: str):
    city = get_city_by_slug(slug)
    if not city:
        raise HTTPException(status_code=404, detail="Service area not found")
    return city
