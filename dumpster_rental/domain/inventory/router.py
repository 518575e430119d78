"""Inventory router - public container catalogue and admin management"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from .schemas import (
    AvailabilityResponse,
    ContainerTypeCreate,
    ContainerTypeResponse,
    ContainerTypeUpdate,
    UnavailableDatesResponse,
)
from .service import InventoryService

router = APIRouter(tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


@router.get("/container-types", response_model=list[ContainerTypeResponse])
async def list_container_types(service: InventoryService = Depends(get_inventory_service)):
    return service.list_container_types()


@router.get("/container-types/{container_type_id}", response_model=ContainerTypeResponse)
async def get_container_type(
    container_type_id: int, service: InventoryService = Depends(get_inventory_service)
):
    return service.get_container_type(container_type_id)


@router.get("/container-types/{container_type_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    container_type_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: InventoryService = Depends(get_inventory_service),
):
    """How many units are free for every day of the range"""
    return service.availability(container_type_id, start_date, end_date)


@router.get(
    "/container-types/{container_type_id}/unavailable-dates",
    response_model=UnavailableDatesResponse,
)
async def get_unavailable_dates(
    container_type_id: int, service: InventoryService = Depends(get_inventory_service)
):
    """Fully booked days over the next year, for greying out the date picker"""
    return {
        "containerTypeId": container_type_id,
        "unavailableDates": service.unavailable_dates(container_type_id),
    }


# ============================================================================
# ADMIN
# ============================================================================


@router.post("/admin/container-types", response_model=ContainerTypeResponse, status_code=201)
async def create_container_type(
    data: ContainerTypeCreate,
    _: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.create_container_type(data)


@router.patch("/admin/container-types/{container_type_id}", response_model=ContainerTypeResponse)
async def update_container_type(
    container_type_id: int,
    data: ContainerTypeUpdate,
    _: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.update_container_type(container_type_id, data)


@router.delete("/admin/container-types/{container_type_id}")
async def delete_container_type(
    container_type_id: int,
    _: User = Depends(get_current_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    service.delete_container_type(container_type_id)
    return {"success": True}
