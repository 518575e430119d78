"""Distance domain - Distance Matrix lookups and delivery distance fees"""

from .router import router

__all__ = ["router"]
