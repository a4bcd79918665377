"""Coupon repository - Database operations for coupon mappings"""

from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import CouponMapping


class CouponRepository:
    @staticmethod
    def get_valid_coupons(db: Session, today: date) -> list[CouponMapping]:
        """Coupons whose window has not ended; no end date means open-ended"""
        return (
            db.query(CouponMapping)
            .filter(or_(CouponMapping.end_date.is_(None), CouponMapping.end_date >= today))
            .order_by(CouponMapping.created_at.desc())
            .all()
        )

    @staticmethod
    def get_coupon(db: Session, coupon_id: str) -> Optional[CouponMapping]:
        return db.query(CouponMapping).filter(CouponMapping.id == coupon_id).first()

    @staticmethod
    def create_coupon(db: Session, **coupon_data) -> CouponMapping:
        coupon = CouponMapping(**coupon_data)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    @staticmethod
    def delete_coupon(db: Session, coupon: CouponMapping) -> None:
        db.delete(coupon)
        db.commit()
