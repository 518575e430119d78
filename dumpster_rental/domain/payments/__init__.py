"""Payments domain - Stripe payment intents, saved cards and booking charges"""

from .router import router

__all__ = ["router"]
