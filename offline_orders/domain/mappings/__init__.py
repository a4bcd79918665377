"""Mappings domain - manager/store/warehouse assignments"""

from .router import router

__all__ = ["router"]
