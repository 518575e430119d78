"""Chat domain - support conversations between customers and the office"""

from .router import router

__all__ = ["router"]
