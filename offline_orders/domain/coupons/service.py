"""Coupon service - Cafe24 coupons linked to curated product lists"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...database import db_operation
from ...exceptions import NotFound
from ...models import CouponMapping
from ...shared.validators import require_valid_id
from .repository import CouponRepository
from .schemas import CouponMappingCreate

logger = logging.getLogger(__name__)


class CouponService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CouponRepository()

    def list_valid(self, today: Optional[date] = None) -> list[CouponMapping]:
        with db_operation(self.db, "Coupon list"):
            return self.repo.get_valid_coupons(self.db, today or date.today())

    def create_coupon(self, data: CouponMappingCreate) -> CouponMapping:
        with db_operation(self.db, "Coupon save"):
            coupon = self.repo.create_coupon(self.db, **data.model_dump())
        logger.info(f"🎟️ Coupon mapping saved: {coupon.coupon_no} ({len(coupon.products)} product(s))")
        return coupon

    def delete_coupon(self, coupon_id: str) -> None:
        require_valid_id(coupon_id)
        with db_operation(self.db, "Coupon delete"):
            coupon = self.repo.get_coupon(self.db, coupon_id)
            if not coupon:
                raise NotFound("Coupon mapping not found")
            self.repo.delete_coupon(self.db, coupon)
