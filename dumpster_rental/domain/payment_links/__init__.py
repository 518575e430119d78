"""Payment links domain - tokenised card collection for phone bookings"""

from .router import router

__all__ = ["router"]
