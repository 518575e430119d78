"""Inventory domain - Container types and availability"""

from .router import router

__all__ = ["router"]
