"""Pricing domain - Rental price breakdowns and quotes"""

from .router import router

__all__ = ["router"]
