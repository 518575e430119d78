"""Admin router - dashboard data and booking management"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from .schemas import (
    AdminBookingResponse,
    AdminPaymentResponse,
    AdminStats,
    AdminUserResponse,
    CancelBookingRequest,
    ExtendBookingRequest,
    PhoneBookingRequest,
    RoleUpdate,
)
from .service import AdminService

router = APIRouter(tags=["Admin"], dependencies=[Depends(get_current_admin)])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.post("/api/admin/create-phone-booking")
async def create_phone_booking(
    data: PhoneBookingRequest, service: AdminService = Depends(get_admin_service)
):
    """Book for a phone customer and email them a link to save their card"""
    return await service.create_phone_booking(data)


@router.post("/api/admin/cancel-booking")
async def cancel_booking(
    data: CancelBookingRequest, service: AdminService = Depends(get_admin_service)
):
    return await service.cancel_booking(data)


@router.post("/api/admin/extend-booking")
async def extend_booking(
    data: ExtendBookingRequest, service: AdminService = Depends(get_admin_service)
):
    return await service.extend_booking(data)


@router.post("/api/admin/migrate-phone-numbers")
async def migrate_phone_numbers(service: AdminService = Depends(get_admin_service)):
    return service.migrate_phone_numbers()


@router.get("/admin/stats", response_model=AdminStats)
async def get_stats(service: AdminService = Depends(get_admin_service)):
    return service.stats()


@router.get("/admin/bookings", response_model=list[AdminBookingResponse])
async def list_bookings(
    status: Optional[str] = Query(None),
    payment_status: Optional[str] = Query(None),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_bookings(status, payment_status)


@router.get("/admin/calendar", response_model=list[AdminBookingResponse])
async def get_calendar(
    start: date = Query(...),
    end: date = Query(...),
    service: AdminService = Depends(get_admin_service),
):
    """Active bookings overlapping the visible calendar range"""
    return service.calendar(start, end)


@router.get("/admin/users", response_model=list[AdminUserResponse])
async def list_users(service: AdminService = Depends(get_admin_service)):
    return service.list_users()


@router.patch("/admin/users/{user_id}/role", response_model=AdminUserResponse)
async def update_user_role(
    user_id: int,
    data: RoleUpdate,
    admin: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_role(user_id, data.role, admin)


@router.get("/admin/payments", response_model=list[AdminPaymentResponse])
async def list_payments(service: AdminService = Depends(get_admin_service)):
    return service.list_payments()
