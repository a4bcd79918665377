"""Coupon router - coupon mapping endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import CouponMappingCreate, serialize_coupon
from .service import CouponService

router = APIRouter(prefix="/api/coupon-mappings", tags=["Coupons"])


def get_coupon_service(db: Session = Depends(get_db)) -> CouponService:
    return CouponService(db)


@router.get("")
async def get_coupons(service: CouponService = Depends(get_coupon_service)):
    """Currently valid coupon mappings (end date today or later)"""
    coupons = service.list_valid()
    return {"success": True, "count": len(coupons), "data": [serialize_coupon(c) for c in coupons]}


@router.post("")
async def create_coupon(data: CouponMappingCreate, service: CouponService = Depends(get_coupon_service)):
    coupon = service.create_coupon(data)
    return {"success": True, "data": serialize_coupon(coupon)}


@router.delete("/{coupon_id}")
async def delete_coupon(coupon_id: str, service: CouponService = Depends(get_coupon_service)):
    service.delete_coupon(coupon_id)
    return {"success": True, "message": "Deleted successfully"}
