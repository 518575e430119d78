"""Bookings domain - Customer bookings and booking notifications"""

from .router import router

__all__ = ["router"]
