"""Admin domain - phone bookings, booking changes and dashboard data"""

from .router import router

__all__ = ["router"]
