"""Order domain schemas - Pydantic models for intake, sync and responses"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Amounts arrive from the intake form as numbers or formatted strings ("15,000")
Amount = Optional[Union[int, float, str]]


class OrderItemIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_no: Optional[Union[str, int]] = None
    product_name: Optional[str] = None
    option_name: Optional[str] = None
    unit_price: Amount = None
    price: Amount = None
    quantity: Amount = None


class OrderCreate(BaseModel):
    """Intake payload. Identity and status fields are never read from it."""

    model_config = ConfigDict(extra="ignore")

    store_name: Optional[str] = None
    manager_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None
    items: Optional[list[OrderItemIn]] = None

    # Legacy single-product fields
    product_name: Optional[str] = None
    option_name: Optional[str] = None
    quantity: Amount = None
    price: Amount = None

    total_amount: Amount = None
    shipping_cost: Amount = None


class OrderUpdate(BaseModel):
    """Editable order fields. Anything else in the body (ids, status flags) is dropped."""

    model_config = ConfigDict(extra="ignore")

    store_name: Optional[str] = None
    manager_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None
    items: Optional[list[OrderItemIn]] = None

    product_name: Optional[str] = None
    option_name: Optional[str] = None
    quantity: Amount = None
    price: Amount = None

    total_amount: Amount = None
    shipping_cost: Amount = None


class SyncOutcome(BaseModel):
    id: str
    status: str = "SUCCESS"
    message: Optional[str] = None


class ContentSyncOutcome(BaseModel):
    customer_name: str
    total_amount: Amount = None
    status: str = "SUCCESS"
    message: Optional[str] = None


class SyncRequest(BaseModel):
    """One of: orderIds (all successful), results (per-id), matches (by content)"""

    orderIds: Optional[list[str]] = None
    results: Optional[list[SyncOutcome]] = None
    matches: Optional[list[ContentSyncOutcome]] = None


class OrderItemOut(BaseModel):
    product_no: Optional[Union[str, int]] = None
    product_name: str = ""
    option_name: str = ""
    unit_price: int = 0
    quantity: int = 1


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    store_name: Optional[str] = None
    manager_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None
    items: list[OrderItemOut]
    product_name: Optional[str] = None
    option_name: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[int] = None
    total_amount: int
    shipping_cost: int
    is_synced: bool
    is_deleted: bool
    external_sync_success: Optional[bool] = None
    external_sync_message: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    synced_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


def serialize_order(order: Any) -> dict:
    return OrderResponse.model_validate(order).model_dump(by_alias=True, mode="json")
