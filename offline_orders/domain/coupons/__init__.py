"""Coupons domain - coupon to product list mappings"""

from .router import router

__all__ = ["router"]
