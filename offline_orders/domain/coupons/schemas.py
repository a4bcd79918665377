"""Coupon mapping schemas"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CouponMappingCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    coupon_no: str
    coupon_name: Optional[str] = None
    products: list[dict[str, Any]] = []
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class CouponMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    coupon_no: str
    coupon_name: Optional[str] = None
    products: list[dict[str, Any]]
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None


def serialize_coupon(coupon) -> dict:
    return CouponMappingResponse.model_validate(coupon).model_dump(by_alias=True, mode="json")
