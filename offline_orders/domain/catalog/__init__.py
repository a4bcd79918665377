"""Catalog domain - Cafe24 product search and payload normalization"""

from .client import Cafe24Client
from .router import router

__all__ = ["Cafe24Client", "router"]
