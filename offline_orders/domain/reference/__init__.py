"""Reference domain - trading partners, staff, warehouses and item codes"""

from .router import router

__all__ = ["router"]
