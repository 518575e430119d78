"""Service areas domain - Cities and ZIP codes served"""

from .router import router

__all__ = ["router"]
